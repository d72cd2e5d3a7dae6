import html
from typing import Optional

import bleach


def clean_text(value: Optional[str]) -> str:
    """Normalise a user-supplied string before it is stored.

    - Strips HTML tags using bleach.clean(..., strip=True)
    - Undoes bleach's entity escaping, so ``a < b & c`` is stored as typed
    - Removes NULL bytes, which PostgreSQL rejects in text columns
    - Trims whitespace
    """
    if value is None:
        return ""
    val = value.replace("\x00", "")
    val = html.unescape(bleach.clean(val, tags=set(), strip=True))
    return val.replace("\x00", "").strip()


def normalise_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()
