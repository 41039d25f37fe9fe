# guardify/rules/phone.py
import re
from typing import Tuple, Pattern

# whitespace, dashes and parentheses are dropped before matching
PHONE_STRIP_RE = re.compile(r"[\s\-()]+")

# BD mobile operators: 013..019
BD_MOBILE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"01[3-9][0-9]{8}"),       # local: 01XXXXXXXXX
    re.compile(r"\+8801[3-9][0-9]{8}"),   # +8801XXXXXXXXX
    re.compile(r"8801[3-9][0-9]{8}"),     # 8801XXXXXXXXX
)

def normalize_phone(raw) -> str:
    if not isinstance(raw, str):
        return ""
    return PHONE_STRIP_RE.sub("", raw)

def is_valid_bd_mobile(raw) -> bool:
    """
    True if `raw` is a Bangladeshi mobile number in local (01XXXXXXXXX)
    or international (+880 / 880 prefixed) form.
    Never raises: anything malformed is simply invalid.
    """
    phone = normalize_phone(raw)
    if not phone:
        return False
    return any(p.fullmatch(phone) for p in BD_MOBILE_PATTERNS)
