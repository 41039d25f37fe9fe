# guardify/services/checkout_guard.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..config import (
    Settings, DEFAULT_PHONE_MESSAGE, DEFAULT_VPN_MESSAGE,
    DEFAULT_BLOCKED_PHONE_MESSAGE, DEFAULT_BLOCKED_IP_MESSAGE,
)
from ..rules.blocklist import is_ip_blocked, is_phone_blocked
from ..rules.phone import is_valid_bd_mobile
from ..rules.proxy import looks_like_proxy
from ..rules.whitelist import is_phone_whitelisted, parse_list
from ..utils.client_ip import get_client_ip
from ..utils.logging import logger

# error codes surfaced to the storefront
PHONE_ERROR = "validation"
VPN_ERROR = "vpn_detected"
BLOCKED_PHONE_ERROR = "guardify_blocked_phone"
BLOCKED_IP_ERROR = "guardify_blocked_ip"

@dataclass(frozen=True)
class GuardConfig:
    phone_validation_enabled: bool = True
    phone_validation_message: str = DEFAULT_PHONE_MESSAGE
    vpn_block_enabled: bool = True
    vpn_block_message: str = DEFAULT_VPN_MESSAGE
    whitelist_enabled: bool = False
    whitelisted_ips: Tuple[str, ...] = ()
    whitelisted_phones: Tuple[str, ...] = ()
    blocked_phones: Tuple[str, ...] = ()
    blocked_ips: Tuple[str, ...] = ()
    blocked_phone_message: str = DEFAULT_BLOCKED_PHONE_MESSAGE
    blocked_ip_message: str = DEFAULT_BLOCKED_IP_MESSAGE

    @classmethod
    def from_settings(cls, s: Settings) -> "GuardConfig":
        return cls(
            phone_validation_enabled=s.BD_PHONE_VALIDATION_ENABLED,
            phone_validation_message=s.BD_PHONE_VALIDATION_MESSAGE,
            vpn_block_enabled=s.VPN_BLOCK_ENABLED,
            vpn_block_message=s.VPN_BLOCK_MESSAGE,
            whitelist_enabled=s.WHITELIST_ENABLED,
            whitelisted_ips=tuple(parse_list(s.WHITELISTED_IPS)),
            whitelisted_phones=tuple(parse_list(s.WHITELISTED_PHONES)),
            blocked_phones=tuple(parse_list(s.BLOCKED_PHONES)),
            blocked_ips=tuple(parse_list(s.BLOCKED_IPS)),
            blocked_phone_message=s.BLOCKED_PHONE_MESSAGE,
            blocked_ip_message=s.BLOCKED_IP_MESSAGE,
        )

@dataclass
class CheckoutSubmission:
    billing_phone: str = ""
    billing_first_name: str = ""
    billing_last_name: str = ""
    customer_order_count: int = 0
    headers: Mapping[str, str] = field(default_factory=dict)
    remote_addr: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.billing_first_name} {self.billing_last_name}".strip()

@dataclass
class CheckoutVerdict:
    errors: List[Tuple[str, str]] = field(default_factory=list)
    client_ip: str = ""

    @property
    def ok(self) -> bool:
        return not self.errors

class GuardHooks(Protocol):
    def on_order_blocked(self, kind: str, submission: CheckoutSubmission, client_ip: str) -> Any: ...

class CheckoutGuard:
    """
    Runs the blocklist, phone and VPN rules for one checkout submission.
    Built once from a GuardConfig and shared between requests.
    """

    def __init__(self, config: GuardConfig, hooks: Sequence[GuardHooks] = ()):
        self.config = config
        self.hooks = list(hooks)

    def _phone_whitelisted(self, phone: str) -> bool:
        return self.config.whitelist_enabled and is_phone_whitelisted(phone, self.config.whitelisted_phones)

    def check_blocklist(self, sub: CheckoutSubmission, client_ip: str) -> Optional[Tuple[str, str, str]]:
        """
        Returns (error_code, message, kind) for a blocklisted phone or IP.
        The phone list wins when both match.
        """
        phone = (sub.billing_phone or "").strip()
        if phone and is_phone_blocked(phone, self.config.blocked_phones):
            return BLOCKED_PHONE_ERROR, self.config.blocked_phone_message, "blocklist_phone"
        if is_ip_blocked(client_ip, self.config.blocked_ips):
            return BLOCKED_IP_ERROR, self.config.blocked_ip_message, "blocklist_ip"
        return None

    def check_phone(self, sub: CheckoutSubmission) -> Optional[str]:
        if not self.config.phone_validation_enabled:
            return None
        phone = (sub.billing_phone or "").strip()
        # empty phone is the host's required-field validation
        if not phone or self._phone_whitelisted(phone):
            return None
        if is_valid_bd_mobile(phone):
            return None
        return self.config.phone_validation_message

    def check_vpn(self, sub: CheckoutSubmission, client_ip: str) -> Optional[str]:
        if not self.config.vpn_block_enabled:
            return None
        # returning customers are trusted
        if (sub.customer_order_count or 0) > 0:
            return None
        whitelist = self.config.whitelisted_ips if self.config.whitelist_enabled else ()
        if looks_like_proxy(sub.headers, whitelist, client_ip):
            return self.config.vpn_block_message
        return None

    def validate(self, sub: CheckoutSubmission) -> CheckoutVerdict:
        client_ip = get_client_ip(sub.headers, sub.remote_addr)
        verdict = CheckoutVerdict(client_ip=client_ip)

        hit = self.check_blocklist(sub, client_ip)
        if hit:
            code, msg, kind = hit
            verdict.errors.append((code, msg))
            self._blocked(kind, sub, client_ip)

        msg = self.check_phone(sub)
        if msg:
            verdict.errors.append((PHONE_ERROR, msg))
            self._blocked("phone", sub, client_ip)

        msg = self.check_vpn(sub, client_ip)
        if msg:
            verdict.errors.append((VPN_ERROR, msg))
            self._blocked("vpn", sub, client_ip)

        return verdict

    def _blocked(self, kind: str, sub: CheckoutSubmission, client_ip: str) -> None:
        logger.info("Checkout blocked: %s (ip=%s)", kind, client_ip)
        for hook in self.hooks:
            try:
                hook.on_order_blocked(kind, sub, client_ip)
            except Exception:
                # a failing listener never changes the verdict
                logger.exception("on_order_blocked hook failed (%s)", kind)
