"""Utility helper functions for the files service."""

import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from common.constants import ROOT_PARENT_ID


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """
    Current time as an aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def normalize_parent_id(parent_id: Optional[Union[str, int]]) -> str:
    """
    Map an incoming parentId onto its canonical string form.

    None and the empty string mean the root; numbers are rendered as strings,
    so 0 and "0" are the same id.
    """
    if parent_id is None or parent_id == "":
        return ROOT_PARENT_ID
    return str(parent_id)


def parse_page(page: Optional[Union[str, int]]) -> int:
    """
    Parse a page query parameter. Missing, negative or non-numeric values
    fall back to the first page.
    """
    try:
        value = int(page)
    except (TypeError, ValueError):
        return 0
    return max(value, 0)
