import ipaddress
from typing import Mapping, Optional

IP_HEADERS = ("CF-Connecting-IP", "X-Real-IP", "X-Forwarded-For")
UNKNOWN_IP = "0.0.0.0"

def _valid_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True

def get_client_ip(headers: Optional[Mapping[str, str]], remote_addr: Optional[str] = None) -> str:
    """First valid IP among the forwarding headers, then the socket address."""
    try:
        candidates = [(headers or {}).get(h) for h in IP_HEADERS]
    except (AttributeError, TypeError):
        candidates = []
    candidates.append(remote_addr)
    for raw in candidates:
        if not raw or not isinstance(raw, str):
            continue
        # X-Forwarded-For: client, proxy1, proxy2
        ip = raw.split(",")[0].strip()
        if _valid_ip(ip):
            return ip
    return UNKNOWN_IP
