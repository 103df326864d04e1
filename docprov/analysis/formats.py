PDF = "pdf"

_ALIASES = {
    "jpg": "jpeg",
    "jpe": "jpeg",
    "tif": "tiff",
}


def normalize_format(format_hint: str | None, data: bytes) -> str:
    """Turn a declared extension into a format name, sniffing bytes if absent."""
    hint = (format_hint or "").strip().lower().lstrip(".")
    if "." in hint:
        hint = hint.rsplit(".", 1)[-1]
    if hint:
        return _ALIASES.get(hint, hint)
    if data.lstrip()[:5] == b"%PDF-":
        return PDF
    return ""
