import hmac
from fastapi import Header, HTTPException

from .config import settings

def verify_internal_secret(header_value: str | None, secret: str) -> bool:
    if not header_value or not secret:
        return False
    # Timing-safe compare
    return hmac.compare_digest(header_value.encode("utf-8"), secret.encode("utf-8"))

def require_internal_auth(x_internal_auth: str | None = Header(None)) -> None:
    if not verify_internal_secret(x_internal_auth, settings.INTERNAL_SHARED_SECRET):
        raise HTTPException(status_code=401, detail="Invalid internal auth")
