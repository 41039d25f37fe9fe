# guardify/rules/proxy.py
from typing import Iterable, Mapping, Optional, Tuple

from .whitelist import is_ip_whitelisted
from ..utils.client_ip import get_client_ip

# Marker headers set by CDNs / reverse proxies / firewalls we trust.
TRUST_HEADERS: Tuple[str, ...] = (
    "CF-Connecting-IP",            # Cloudflare
    "CF-Ray",
    "Fastly-Client-IP",            # Fastly
    "CloudFront-Forwarded-Proto",  # AWS CloudFront
    "True-Client-IP",              # Akamai
    "X-Real-IP",                   # nginx / load balancers
    "X-Sucuri-ClientIP",           # Sucuri firewall
)

# Generic proxy / VPN indicators, only looked at when no trust header is present.
PROXY_HEADERS: Tuple[str, ...] = (
    "Via",
    "Proxy-Connection",
    "XProxy-Connection",
    "X-Proxy-ID",
    "Proxy-Authorization",
)

def _has_header(headers: Optional[Mapping[str, str]], name: str) -> bool:
    if headers is None:
        return False
    try:
        value = headers.get(name)
    except (AttributeError, TypeError):
        return False
    return isinstance(value, str) and value != ""

def is_trusted_edge(headers: Optional[Mapping[str, str]]) -> bool:
    return any(_has_header(headers, h) for h in TRUST_HEADERS)

def has_proxy_headers(headers: Optional[Mapping[str, str]]) -> bool:
    return any(_has_header(headers, h) for h in PROXY_HEADERS)

def looks_like_proxy(
    headers: Optional[Mapping[str, str]],
    whitelist: Iterable[str] = (),
    client_ip: Optional[str] = None,
) -> bool:
    """
    Two-tier header heuristic:
      - allowlisted client IP -> not a proxy (taken from the forwarding
        headers when client_ip is not given)
      - any trust header      -> not a proxy (checked before proxy headers)
      - any proxy header      -> proxy
      - otherwise             -> not a proxy
    Pure: no I/O, never raises.
    """
    if client_ip is None:
        client_ip = get_client_ip(headers)
    if is_ip_whitelisted(client_ip, whitelist):
        return False
    if is_trusted_edge(headers):
        return False
    return has_proxy_headers(headers)
