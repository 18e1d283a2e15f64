from __future__ import annotations

import ast
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .core import HeaderDataError, MissingHeaderDumpError


def load_output_file(path: str) -> str:
    """Load the contents of a header dump file, trying multiple encodings."""
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError as exc:
        raise MissingHeaderDumpError(f"Header dump not found: {path!r}") from exc

    for enc in ("utf-8", "utf-8-sig", "utf-16"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue

    return raw.decode("latin-1", errors="ignore")


def parse_dump_text(text: str, source: str = "<text>") -> dict[str, Any]:
    """Parse a header dump given as JSON or as a Python dict literal."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        try:
            value = ast.literal_eval(text.strip())
        except (ValueError, SyntaxError) as exc:
            raise HeaderDataError(f"Unreadable header dump in {source!r}") from exc

    if not isinstance(value, Mapping):
        raise HeaderDataError(f"Expected a dict in {source!r}")
    return dict(value)


def load_header_dump(path: str) -> dict[str, Any]:
    """Load a header dump file expected to contain a single dict."""
    return parse_dump_text(load_output_file(path), source=path)


def _ensure_str(value: Any) -> str:
    """Ensure the value is a string, decoding bytes if necessary."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="ignore")
    return str(value)
