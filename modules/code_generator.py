"""
Packing list code generation.

Format: LOMPL + day month year hour minute second (ddmmyyHHMMSS),
e.g. LOMPL191026143005 for 19 Oct 2026 14:30:05.
"""

import re
from datetime import datetime
from typing import Optional

CODE_PREFIX = "LOMPL"

_CODE_PATTERN = re.compile(rf"^{CODE_PREFIX}\d{{12}}$")


def generate_packing_list_code(now: Optional[datetime] = None) -> str:
    """
    Generate a packing list code from a timestamp.

    Args:
        now: Timestamp to encode (default: current local time)

    Returns:
        Code such as "LOMPL191026143005"
    """
    now = now or datetime.now()
    return f"{CODE_PREFIX}{now.strftime('%d%m%y%H%M%S')}"


def is_valid_packing_list_code(code: str) -> bool:
    """Check that a code is LOMPL followed by exactly 12 digits."""
    if not isinstance(code, str):
        return False
    return _CODE_PATTERN.fullmatch(code) is not None
