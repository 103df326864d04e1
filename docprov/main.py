import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from docprov.config.settings import Settings
from docprov.logging.logger import Log
from docprov.service.service import build_service


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docprov",
        description="Register and verify documents within one in-memory ledger session.",
    )
    parser.add_argument("--issuer", help="issuer identity for registered documents")
    parser.add_argument("--type", dest="document_type", help="document type, e.g. passport")
    parser.add_argument("--register", nargs="*", default=[], type=Path, metavar="FILE")
    parser.add_argument("--verify", nargs="*", default=[], type=Path, metavar="FILE")
    args = parser.parse_args(argv)
    if args.register and not (args.issuer and args.document_type):
        parser.error("--register requires --issuer and --type")
    return args


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> service -> register files -> verify files."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    service = build_service(settings)

    try:
        for path in args.register:
            receipt = service.register_document(
                path.read_bytes(),
                issuer=args.issuer,
                document_type=args.document_type,
                metadata={"filename": path.name},
            )
            print(json.dumps({"registered": str(path), **asdict(receipt)}))

        for path in args.verify:
            report = service.verify_document(path.read_bytes(), format_hint=path.suffix)
            print(
                json.dumps(
                    {"verified": str(path), **report.to_dict()},
                    default=str,
                    ensure_ascii=False,
                )
            )
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
