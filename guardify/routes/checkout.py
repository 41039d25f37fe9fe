from functools import lru_cache

from fastapi import APIRouter, Depends
from requests.structures import CaseInsensitiveDict
from sqlalchemy.orm import Session

from ..celery_worker import DiscordNotifier
from ..config import settings
from ..database import get_db
from ..schemas import CheckoutInput, CheckoutResponse, CheckoutError, PhoneInput, PhoneResponse
from ..security import require_internal_auth
from ..services.blocked_log import BlockedAttemptRecorder
from ..services.checkout_guard import CheckoutGuard, CheckoutSubmission, GuardConfig

router = APIRouter(prefix="/v1", tags=["checkout"], dependencies=[Depends(require_internal_auth)])

@lru_cache(maxsize=1)
def get_guard_config() -> GuardConfig:
    return GuardConfig.from_settings(settings)

@router.post("/checkout/validate", response_model=CheckoutResponse)
def validate_checkout(payload: CheckoutInput,
                      db: Session = Depends(get_db),
                      config: GuardConfig = Depends(get_guard_config)):
    # header names from the storefront are matched case-insensitively
    headers = CaseInsensitiveDict(payload.headers)
    sub = CheckoutSubmission(
        billing_phone=payload.billing_phone,
        billing_first_name=payload.billing_first_name,
        billing_last_name=payload.billing_last_name,
        customer_order_count=payload.customer_order_count,
        headers=headers,
        remote_addr=payload.remote_addr,
    )
    hooks = [BlockedAttemptRecorder(db, user_agent=headers.get("user-agent")), DiscordNotifier()]
    verdict = CheckoutGuard(config, hooks=hooks).validate(sub)
    return CheckoutResponse(
        ok=verdict.ok,
        errors=[CheckoutError(code=code, message=msg) for code, msg in verdict.errors],
    )

@router.post("/phone/validate", response_model=PhoneResponse)
def validate_phone(payload: PhoneInput, config: GuardConfig = Depends(get_guard_config)):
    """Live field check for the checkout form. No blocking, no logging."""
    msg = CheckoutGuard(config).check_phone(CheckoutSubmission(billing_phone=payload.phone))
    if msg is None:
        return PhoneResponse(valid=True)
    return PhoneResponse(valid=False, message=msg)
