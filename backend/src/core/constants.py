"""
Application-wide constants: roles, genres and validation limits.

Note: The limits are mirrored in the frontend form for immediate UX feedback. The backend
checks in services/validation.py are the authoritative ones.
"""
from enum import Enum


class Role(Enum):
    """
    User roles.

    ADMIN: first user ever provisioned; can delete any recommendation and toggle staff picks.
    USER: everyone else; can only delete their own recommendations.
    """

    ADMIN = "admin"
    USER = "user"


GENRES: tuple[str, ...] = (
    "Movies & TV",
    "Music",
    "Books",
    "Games",
    "Tech",
    "Food & Drinks",
    "Travel",
    "Other",
)

# Feed filter value meaning "no filtering"
ALL_GENRES = "all"

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 200
BLURB_MAX_LENGTH = 500
LINK_MAX_LENGTH = 2048

# Raw input is truncated to this before sanitizing so regexes never run on huge payloads
MAX_RAW_INPUT_LENGTH = 10_000

ANONYMOUS_NAME = "Anonymous"
