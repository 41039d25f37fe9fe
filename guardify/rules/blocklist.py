# guardify/rules/blocklist.py
import re
from typing import Iterable, Optional, Set

# blocklist matching also drops "+", so +880 and 880 collapse
_PHONE_JUNK_RE = re.compile(r"[\s\-()+]+")
_INTL_OR_BARE_RE = re.compile(r"(?:880)?(1[3-9][0-9]{8})")
_LOCAL_RE = re.compile(r"0(1[3-9][0-9]{8})")

def phone_variants(raw) -> Set[str]:
    """
    Every spelling of a BD mobile number: 01XXXXXXXXX, 1XXXXXXXXX,
    8801XXXXXXXXX and +8801XXXXXXXXX. Anything else maps to itself.
    """
    if not isinstance(raw, str):
        return set()
    phone = _PHONE_JUNK_RE.sub("", raw)
    if not phone:
        return set()
    m = _INTL_OR_BARE_RE.fullmatch(phone) or _LOCAL_RE.fullmatch(phone)
    if not m:
        return {phone}
    digits = m.group(1)
    return {"0" + digits, digits, "880" + digits, "+880" + digits}

def is_phone_blocked(phone, blocklist: Iterable[str]) -> bool:
    variants = phone_variants(phone)
    if not variants:
        return False
    return any(variants & phone_variants(blocked) for blocked in blocklist or ())

def is_ip_blocked(ip: Optional[str], blocklist: Iterable[str]) -> bool:
    if not ip:
        return False
    return ip.strip() in {entry.strip() for entry in blocklist or ()}
