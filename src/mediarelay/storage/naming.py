"""Storage-safe file names derived from human-readable titles."""

import re
import unicodedata
from typing import Optional

# Human-readable separators folded into "-", applied in this order
_SEPARATOR_PATTERNS = [
    re.compile(pattern)
    for pattern in (
        r"\.\s",
        r",\s",
        r"\s::\s",
        r"\s:\s",
        r":\s",
        r"\s-\s",
        r"\s--\s",
        r"\s–\s",
        r"\s––\s",
        r"\s—\s",
        r"\s——\s",
    )
]

_LEADING_SPACE = re.compile(r"\A\s")
_TRAILING_DOT = re.compile(r"\.\Z")
_ELLIPSIS = re.compile(r"…\s")
_DASH_RUN = re.compile(r"[-|\\]+")
_SPACED_AMPERSAND = re.compile(r"\s&\s")
_PUNCTUATION = re.compile(r"[!@#$%^*()+=\[\]{};'’:\"”“,.<>/?]+")
_WHITESPACE = re.compile(r"\s")
_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]+")
_BIDI_CONTROLS = re.compile(r"[\u202a-\u202c]+")


def _sanitize_once(name: str) -> str:
    clean = _LEADING_SPACE.sub("", name, count=1)
    clean = _TRAILING_DOT.sub("", clean, count=1)
    for pattern in _SEPARATOR_PATTERNS:
        clean = pattern.sub("-", clean)
    clean = _ELLIPSIS.sub("_", clean)
    clean = _DASH_RUN.sub("-", clean)
    clean = _SPACED_AMPERSAND.sub(" and ", clean)
    clean = clean.replace("&", "n")
    clean = _PUNCTUATION.sub("", clean)
    clean = _WHITESPACE.sub("_", clean)
    clean = unicodedata.normalize("NFD", clean)
    clean = _COMBINING_MARKS.sub("", clean)
    clean = _BIDI_CONTROLS.sub("", clean)
    return clean


def sanitize(display_name: str) -> str:
    """Convert a record title into a file name ready for upload.

    "The Lord of the Rings: Fellowship" becomes
    "The_Lord_of_the_Rings-Fellowship". The transform is repeated until it
    stops changing the name, because decomposition can expose characters an
    earlier step removes ("≠" decomposes to "=" plus a combining mark).
    Passes after the first only delete characters, so the loop ends.

    Args:
        display_name: Human-readable title

    Returns:
        Sanitized name; empty when the title holds no retained characters
    """
    current = display_name
    while True:
        cleaned = _sanitize_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def build_object_key(folder: Optional[str], name: str, extension: Optional[str]) -> str:
    """Join folder, sanitized name and extension into a B2 object key.

    An empty folder puts the file at the bucket root and an empty extension
    leaves the name without a trailing dot.
    """
    key = name
    extension = (extension or "").lstrip(".")
    if extension:
        key = f"{key}.{extension}"
    folder = (folder or "").strip("/")
    if folder:
        key = f"{folder}/{key}"
    return key
