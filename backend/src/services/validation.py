"""
Sanitization and validation of user-submitted recommendation fields.

Note: The length checks are intentionally duplicated in the frontend form for immediate UX
feedback. Client-side checks are advisory only; everything here runs on every write.
"""
import re
from urllib.parse import urlparse

from core.constants import (
    BLURB_MAX_LENGTH,
    GENRES,
    LINK_MAX_LENGTH,
    MAX_RAW_INPUT_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from core.exceptions import (
    InvalidBlurbError,
    InvalidGenreError,
    InvalidLinkError,
    InvalidTitleError,
)

_SCRIPT_BLOCK_RE = re.compile(r"<\s*script\b[^>]*>.*?<\s*/\s*script\s*>", re.IGNORECASE | re.DOTALL)
# Only HTML-looking tags (letter right after "<" or "</"); bare "<" and ">" in text survive
_TAG_RE = re.compile(r"</?[A-Za-z][^>]*>")
ALLOWED_LINK_SCHEMES = ("http", "https")


def sanitize_text(value: str | None) -> str:
    """
    Cap raw length, strip script blocks and any remaining HTML tags, then trim.

    Examples:
        '  Dune  ' -> 'Dune'
        'Hi<script>alert(1)</script>' -> 'Hi'
        '<b>Bold</b> move' -> 'Bold move'
        '1 < 2 > 0' -> '1 < 2 > 0'
    """
    if not value:
        return ""
    text = value[:MAX_RAW_INPUT_LENGTH]
    text = _SCRIPT_BLOCK_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return text.strip()


def validate_title(title: str | None) -> str:
    """Return the sanitized title or raise InvalidTitleError."""
    cleaned = sanitize_text(title)
    if not TITLE_MIN_LENGTH <= len(cleaned) <= TITLE_MAX_LENGTH:
        raise InvalidTitleError()
    return cleaned


def validate_blurb(blurb: str | None) -> str:
    """Return the sanitized blurb (may be empty) or raise InvalidBlurbError."""
    cleaned = sanitize_text(blurb)
    if len(cleaned) > BLURB_MAX_LENGTH:
        raise InvalidBlurbError()
    return cleaned


def validate_link(link: str | None) -> str:
    """
    Return the sanitized link (may be empty) or raise InvalidLinkError.

    A non-empty link must be an absolute http(s) URL with a host, at most
    LINK_MAX_LENGTH characters long. Links are never rewritten: if sanitizing would change
    anything beyond surrounding whitespace, the link is rejected.
    """
    cleaned = sanitize_text(link)
    if not cleaned:
        return ""
    if cleaned != link.strip():
        raise InvalidLinkError()
    if len(cleaned) > LINK_MAX_LENGTH or any(c.isspace() for c in cleaned):
        raise InvalidLinkError()
    try:
        parsed = urlparse(cleaned)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidLinkError() from e
    if parsed.scheme.lower() not in ALLOWED_LINK_SCHEMES or not hostname:
        raise InvalidLinkError()
    return cleaned


def validate_genre(genre: str | None) -> str:
    """
    Require an exact member of GENRES.

    Genre is not run through sanitize_text: membership in a fixed set already rules out
    arbitrary content.
    """
    if genre not in GENRES:
        raise InvalidGenreError()
    return genre
