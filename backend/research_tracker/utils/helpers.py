"""General helper utilities."""
import re
import secrets
import time
from pathlib import Path

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_\-一-龥\s]")


def make_id(prefix: str = "id") -> str:
    """Return an internal id such as ``p_3f9a1c2b7d4e_18c2f0a1b2c``."""
    return f"{prefix}_{secrets.token_hex(6)}_{int(time.time() * 1000):x}"


def sanitize_name(name: str) -> str:
    """Replace every character that is unsafe in a folder or file stem with ``_``."""
    return _UNSAFE_NAME_CHARS.sub("_", name)


def file_extension(filename: str) -> str:
    """Return the sanitized extension with its dot (``".pdf"``), or ``""``."""
    suffix = Path(filename or "").suffix.lstrip(".")
    return f".{sanitize_name(suffix)}" if suffix else ""


def is_present(value: str | None) -> bool:
    """True for a real form value; browsers post ``"undefined"`` / ``"null"`` for unset fields."""
    return bool(value) and value not in ("undefined", "null")
