from typing import Any, Optional

from pydantic import BaseModel


#------------------------LG-PAY------------------------
class OrderCreate(BaseModel):
    amount: Any = None    # major units, e.g. "199.5"


class OrderResponse(BaseModel):
    success: bool
    order_sn: str
    amount: int                 # in minor units
    payment_url: Optional[str] = None
    response: Any = None


#------------------------RAZORPAY------------------------
class PaymentVerification(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class PaymentVerificationResponse(BaseModel):
    success: bool
    message: str
