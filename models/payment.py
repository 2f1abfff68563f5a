# models/payment.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PaymentCreate(BaseModel):
    """
    Tenant-submitted payment. Lands in 'pending' until an admin verifies it.
    """
    model_config = ConfigDict(populate_by_name=True)

    lease_id: str = Field(..., alias="leaseId")
    amount: float = Field(..., gt=0)
    payment_method: str = Field(..., alias="paymentMethod")
    reference: str = Field(..., min_length=1)


class PaymentVerify(BaseModel):
    """
    paymentId is optional at the schema level so a missing value
    answers 400 'Payment ID is required' instead of a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    payment_id: Optional[str] = Field(None, alias="paymentId")


class PaymentReject(PaymentVerify):
    reason: Optional[str] = None
