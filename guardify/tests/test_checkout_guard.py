# tests/test_checkout_guard.py
from guardify.config import Settings
from guardify.services.checkout_guard import (
    BLOCKED_IP_ERROR, BLOCKED_PHONE_ERROR, CheckoutGuard, CheckoutSubmission, GuardConfig,
    PHONE_ERROR, VPN_ERROR,
)

class RecordingHook:
    def __init__(self):
        self.events = []

    def on_order_blocked(self, kind, submission, client_ip):
        self.events.append((kind, submission.billing_phone, client_ip))

class BrokenHook:
    def on_order_blocked(self, kind, submission, client_ip):
        raise RuntimeError("listener down")

def _sub(**kw):
    base = {"billing_phone": "01712345678", "remote_addr": "103.1.1.1"}
    base.update(kw)
    return CheckoutSubmission(**base)

def test_clean_checkout_passes():
    hook = RecordingHook()
    verdict = CheckoutGuard(GuardConfig(), hooks=[hook]).validate(_sub())
    assert verdict.ok
    assert verdict.client_ip == "103.1.1.1"
    assert hook.events == []

def test_invalid_phone_blocks_with_message():
    config = GuardConfig(phone_validation_message="bad phone")
    hook = RecordingHook()
    verdict = CheckoutGuard(config, hooks=[hook]).validate(_sub(billing_phone="01212345678"))
    assert not verdict.ok
    assert verdict.errors == [(PHONE_ERROR, "bad phone")]
    assert hook.events == [("phone", "01212345678", "103.1.1.1")]

def test_empty_phone_left_to_host():
    verdict = CheckoutGuard(GuardConfig()).validate(_sub(billing_phone="  "))
    assert verdict.ok

def test_phone_rule_disabled():
    config = GuardConfig(phone_validation_enabled=False)
    assert CheckoutGuard(config).validate(_sub(billing_phone="123")).ok

def test_whitelisted_phone_skips_validation():
    config = GuardConfig(whitelist_enabled=True, whitelisted_phones=("+1 555 0100",))
    assert CheckoutGuard(config).validate(_sub(billing_phone="+15550100")).ok
    # allowlist only counts while the feature is on
    config = GuardConfig(whitelist_enabled=False, whitelisted_phones=("+1 555 0100",))
    assert not CheckoutGuard(config).validate(_sub(billing_phone="+15550100")).ok

def test_proxy_headers_block():
    config = GuardConfig(vpn_block_message="no vpn")
    hook = RecordingHook()
    verdict = CheckoutGuard(config, hooks=[hook]).validate(_sub(headers={"Via": "1.1 squid"}))
    assert verdict.errors == [(VPN_ERROR, "no vpn")]
    assert hook.events == [("vpn", "01712345678", "103.1.1.1")]

def test_cdn_traffic_not_blocked():
    headers = {"CF-Connecting-IP": "103.2.2.2", "Via": "1.1 cloudflare"}
    verdict = CheckoutGuard(GuardConfig()).validate(_sub(headers=headers))
    assert verdict.ok
    assert verdict.client_ip == "103.2.2.2"

def test_returning_customer_skips_vpn_check():
    verdict = CheckoutGuard(GuardConfig()).validate(_sub(headers={"Via": "x"}, customer_order_count=3))
    assert verdict.ok

def test_whitelisted_ip_skips_vpn_check():
    config = GuardConfig(whitelist_enabled=True, whitelisted_ips=("103.1.1.0/24",))
    assert CheckoutGuard(config).validate(_sub(headers={"Via": "x"})).ok
    config = GuardConfig(whitelist_enabled=False, whitelisted_ips=("103.1.1.0/24",))
    assert not CheckoutGuard(config).validate(_sub(headers={"Via": "x"})).ok

def test_vpn_rule_disabled():
    config = GuardConfig(vpn_block_enabled=False)
    assert CheckoutGuard(config).validate(_sub(headers={"Via": "x"})).ok

def test_both_rules_reported():
    hook = RecordingHook()
    verdict = CheckoutGuard(GuardConfig(), hooks=[hook]).validate(
        _sub(billing_phone="999", headers={"Proxy-Authorization": "Basic abc"}))
    assert [code for code, _ in verdict.errors] == [PHONE_ERROR, VPN_ERROR]
    assert [e[0] for e in hook.events] == ["phone", "vpn"]

def test_failing_hook_does_not_change_verdict():
    hook = RecordingHook()
    verdict = CheckoutGuard(GuardConfig(), hooks=[BrokenHook(), hook]).validate(_sub(headers={"Via": "x"}))
    assert [code for code, _ in verdict.errors] == [VPN_ERROR]
    assert len(hook.events) == 1

def test_config_from_settings():
    s = Settings(
        BD_PHONE_VALIDATION_ENABLED=False,
        VPN_BLOCK_MESSAGE="blocked",
        WHITELIST_ENABLED=True,
        WHITELISTED_IPS="10.0.0.1\n192.168.0.0/16\n",
        WHITELISTED_PHONES="01712345678",
        BLOCKED_PHONES="+8801812345678\n",
        BLOCKED_IPS="45.6.7.8",
        BLOCKED_IP_MESSAGE="ip blocked",
    )
    config = GuardConfig.from_settings(s)
    assert config.phone_validation_enabled is False
    assert config.vpn_block_message == "blocked"
    assert config.whitelisted_ips == ("10.0.0.1", "192.168.0.0/16")
    assert config.whitelisted_phones == ("01712345678",)
    assert config.blocked_phones == ("+8801812345678",)
    assert config.blocked_ips == ("45.6.7.8",)
    assert config.blocked_ip_message == "ip blocked"

def test_blocked_phone_any_format():
    config = GuardConfig(blocked_phones=("+8801712345678",), blocked_phone_message="phone blocked")
    hook = RecordingHook()
    verdict = CheckoutGuard(config, hooks=[hook]).validate(_sub(billing_phone="017-1234-5678"))
    assert verdict.errors == [(BLOCKED_PHONE_ERROR, "phone blocked")]
    assert hook.events == [("blocklist_phone", "017-1234-5678", "103.1.1.1")]

def test_blocked_ip():
    config = GuardConfig(blocked_ips=("103.1.1.1",), blocked_ip_message="ip blocked")
    hook = RecordingHook()
    verdict = CheckoutGuard(config, hooks=[hook]).validate(_sub())
    assert verdict.errors == [(BLOCKED_IP_ERROR, "ip blocked")]
    assert [e[0] for e in hook.events] == ["blocklist_ip"]

def test_blocked_phone_reported_once_when_ip_also_listed():
    config = GuardConfig(blocked_phones=("01712345678",), blocked_ips=("103.1.1.1",))
    hook = RecordingHook()
    verdict = CheckoutGuard(config, hooks=[hook]).validate(_sub())
    assert [code for code, _ in verdict.errors] == [BLOCKED_PHONE_ERROR]
    assert [e[0] for e in hook.events] == ["blocklist_phone"]

def test_blocklist_checked_before_other_rules():
    config = GuardConfig(blocked_ips=("103.1.1.1",))
    verdict = CheckoutGuard(config).validate(_sub(billing_phone="999", headers={"Via": "x"}))
    assert [code for code, _ in verdict.errors] == [BLOCKED_IP_ERROR, PHONE_ERROR, VPN_ERROR]

def test_blocklist_applies_to_returning_customers_and_disabled_rules():
    config = GuardConfig(
        phone_validation_enabled=False,
        vpn_block_enabled=False,
        blocked_phones=("01712345678",),
    )
    verdict = CheckoutGuard(config).validate(_sub(customer_order_count=5))
    assert [code for code, _ in verdict.errors] == [BLOCKED_PHONE_ERROR]
