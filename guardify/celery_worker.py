import math
import time
import requests
from celery import Celery

from guardify.config import settings
from guardify.utils.logging import logger

celery = Celery("guardify", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    broker_connection_retry_on_startup=True,
    worker_prefetch_multiplier=1,
)

MAX_ATTEMPTS = 3
RETRY_DELAY = 5.0
MAX_RETRY_AFTER = 60
BLOCK_LABELS = {
    "vpn": "VPN/Proxy detected",
    "phone": "Invalid phone number",
    "blocklist_phone": "Blocklisted phone number",
    "blocklist_ip": "Blocklisted IP address",
}

def build_blocked_message(kind: str, ip: str | None, phone: str | None) -> str:
    label = BLOCK_LABELS.get(kind, kind)
    lines = [f"🚫 **Checkout blocked**: {label}"]
    if phone:
        lines.append(f"Phone: `{phone}`")
    if ip:
        lines.append(f"IP: `{ip}`")
    return "\n".join(lines)

def _retry_after(r: requests.Response) -> float:
    try:
        value = min(float((r.json() or {}).get("retry_after", 2)), MAX_RETRY_AFTER)
        delay = math.ceil(value)
    except (ValueError, TypeError, AttributeError, OverflowError):
        delay = 2
    return max(1, delay)

def send_discord_webhook(payload: dict, url: str | None = None, sleep=time.sleep) -> bool:
    url = url or settings.DISCORD_WEBHOOK_URL
    if not url:
        logger.warning("Discord: no webhook URL configured, skipping notification")
        return False

    payload = {**payload, "username": settings.DISCORD_BOT_NAME}

    for attempt in range(1, MAX_ATTEMPTS + 1):
        delay = RETRY_DELAY
        try:
            r = requests.post(url, json=payload, timeout=15)
        except requests.RequestException as e:
            logger.error("Discord error (attempt %s): %s", attempt, e)
        else:
            if 200 <= r.status_code < 300:
                return True
            if r.status_code == 429:
                delay = _retry_after(r)
                logger.warning("Discord rate limited, retry after %ss (attempt %s)", delay, attempt)
            elif r.status_code >= 500:
                logger.error("Discord HTTP %s (attempt %s): %s", r.status_code, attempt, (r.text or "")[:300])
            else:
                logger.error("Discord HTTP %s: %s", r.status_code, (r.text or "")[:300])
                return False
        if attempt < MAX_ATTEMPTS:
            sleep(delay)
    return False

@celery.task(name="notify_order_blocked")
def notify_order_blocked(kind: str, ip: str | None = None, phone: str | None = None) -> bool:
    ok = send_discord_webhook({"content": build_blocked_message(kind, ip, phone)})
    logger.info("Blocked-order notification (%s) delivered=%s", kind, ok)
    return ok

class DiscordNotifier:
    """on_order_blocked listener that hands the notification to a worker."""

    def on_order_blocked(self, kind: str, submission, client_ip: str) -> None:
        notify_order_blocked.delay(kind, client_ip, submission.billing_phone or None)
