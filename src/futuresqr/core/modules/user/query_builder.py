"""Query construction for the named user lookups."""

import re
from typing import Any

USER_SORT: list[tuple[str, int]] = [("login_name", 1)]


def login_name_query(login_name: str) -> dict[str, Any]:
    """Exact, case-sensitive match on the login name."""
    return {"login_name": login_name}


def contains_query(field: str, text: str) -> dict[str, Any]:
    """Case-insensitive substring match, the input is matched literally."""
    return {field: {"$regex": re.escape(text), "$options": "i"}}


def contains(value: str, text: str) -> bool:
    """In-memory counterpart of ``contains_query``."""
    return text.casefold() in value.casefold()
