"""
Stored-name generation for uploaded files.

A stored name is ``<prefix>-<sanitized original name>`` where the prefix is a
millisecond timestamp followed by a random token, e.g.
``1718000000000-9f1c2ab43d7e5f60-report.pdf``.
"""
import re
import time
import unicodedata
import uuid
from typing import Optional

TOKEN_LENGTH = 16
# "<13-digit ms>-<token>-"
PREFIX_LENGTH = 13 + 1 + TOKEN_LENGTH + 1
# filesystems cap a single name at 255 bytes; keep some headroom
MAX_NAME_BYTES = 255 - PREFIX_LENGTH - 24
FALLBACK_NAME = "file"

# Control characters plus the characters Windows refuses in file names
_UNSAFE_CHARS = re.compile(r'[\x00-\x1f\x7f<>:"/\\|?*]')
_STORED_NAME = re.compile(r"^(\d{13})-([0-9a-f]{%d})-(.+)$" % TOKEN_LENGTH)


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Reduce a client-supplied file name to a safe single path segment.

    Transformations applied in order:
    1. Keep only the last path component (``/`` and ``\\`` both count)
    2. NFC-normalize unicode
    3. Replace control and reserved characters with underscores
    4. Strip surrounding whitespace; a name made only of dots becomes empty
    5. Cap the UTF-8 length on a character boundary, preserving the extension

    Args:
        filename: Original filename
            Example: "../../etc/passwd" or "C:\\Users\\me\\My Report.pdf"

    Returns:
        Sanitized filename
            Example: "passwd" or "My Report.pdf"
    """
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = unicodedata.normalize("NFC", name)
    name = _UNSAFE_CHARS.sub("_", name)
    name = name.strip()
    if not name.strip("."):
        name = ""

    if len(name.encode("utf-8")) > MAX_NAME_BYTES:
        stem, dot, ext = name.rpartition(".")
        ext_bytes = len(ext.encode("utf-8"))
        if dot and stem and 0 < ext_bytes < 16:
            name = _truncate_utf8(stem, MAX_NAME_BYTES - ext_bytes - 1) + "." + ext
        else:
            name = _truncate_utf8(name, MAX_NAME_BYTES)

    return name or FALLBACK_NAME


def _truncate_utf8(text: str, max_bytes: int) -> str:
    # a multi-byte character cut in half is dropped
    return text.encode("utf-8")[:max_bytes].decode("utf-8", "ignore").rstrip()


def unique_prefix() -> str:
    """Millisecond timestamp plus a random token; unique even within one millisecond."""
    return f"{int(time.time() * 1000):013d}-{uuid.uuid4().hex[:TOKEN_LENGTH]}"


def make_stored_name(original_name: Optional[str]) -> str:
    return f"{unique_prefix()}-{sanitize_filename(original_name)}"


def original_name_from(stored_name: str) -> str:
    """Recover the sanitized original name; names not produced here are returned unchanged."""
    match = _STORED_NAME.match(stored_name)
    return match.group(3) if match else stored_name
