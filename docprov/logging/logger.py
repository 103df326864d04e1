import logging
import sys

FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(message)s"


class Log:
    """Process-wide logger. Keyword context is rendered as sorted key=value pairs."""

    _logger: logging.Logger = logging.getLogger("docprov")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(FORMAT))
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        """Log an info message."""
        cls._logger.info(_render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        """Log an error message."""
        cls._logger.error(_render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        """Log a warning message."""
        cls._logger.warning(_render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        """Log a debug message."""
        if cls._logger.isEnabledFor(logging.DEBUG):
            cls._logger.debug(_render(message, context))


def _render(message: str, context: dict[str, object]) -> str:
    if not context:
        return message
    pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
    return f"{message} | {pairs}"
