# guardify/rules/whitelist.py
import ipaddress
import re
from typing import Iterable, List

from .phone import normalize_phone

_SPLIT_RE = re.compile(r"[\r\n,]+")

def parse_list(text: str | None) -> List[str]:
    """Newline (or comma) separated settings text -> stripped, non-empty entries."""
    if not text:
        return []
    return [item.strip() for item in _SPLIT_RE.split(text) if item.strip()]

def _ip_in_network(ip: str, cidr: str) -> bool:
    try:
        addr = ipaddress.ip_address(ip)
        net = ipaddress.ip_network(cidr, strict=False)
    except ValueError:
        return False
    return addr.version == net.version and addr in net

def is_ip_whitelisted(ip: str | None, whitelist: Iterable[str]) -> bool:
    if not ip:
        return False
    ip = ip.strip()
    for entry in whitelist or ():
        if entry == ip:
            return True
        if "/" in entry and _ip_in_network(ip, entry):
            return True
    return False

def is_phone_whitelisted(phone: str | None, whitelist: Iterable[str]) -> bool:
    phone = normalize_phone(phone)
    if not phone:
        return False
    return phone in {normalize_phone(p) for p in whitelist or ()}
