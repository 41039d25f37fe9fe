from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from datetime import datetime

class CheckoutInput(BaseModel):
    billing_phone: str = ""
    billing_first_name: str = ""
    billing_last_name: str = ""
    customer_order_count: int = 0
    # headers of the shopper's request, as seen by the storefront
    headers: Dict[str, str] = Field(default_factory=dict)
    remote_addr: Optional[str] = None

class CheckoutError(BaseModel):
    code: str
    message: str

class CheckoutResponse(BaseModel):
    ok: bool
    errors: List[CheckoutError] = Field(default_factory=list)

class PhoneInput(BaseModel):
    phone: str = ""

class PhoneResponse(BaseModel):
    valid: bool
    message: Optional[str] = None

class BlockedStats(BaseModel):
    total: int
    by_type: Dict[str, int]
    by_day: Dict[str, int]

class BlockedAttemptOut(BaseModel):
    kind: str
    phone: Optional[str] = None
    name: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
