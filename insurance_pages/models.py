"""
Records returned by the insurance backend API.

The backend speaks camelCase JSON; attributes are snake_case and both spellings
are accepted on input.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ClaimStatus = Literal["submitted", "under_review", "approved", "denied", "paid"]
PaymentType = Literal["premium", "claim", "refund"]
PaymentStatus = Literal["pending", "completed", "failed", "refunded"]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Claim(ApiModel):
    id: str
    policy_id: str
    claim_number: str
    claim_type: str
    status: ClaimStatus
    amount: float
    description: str
    date_of_loss: str
    submitted_date: str
    resolved_date: str | None = None
    created_at: str
    updated_at: str


class Payment(ApiModel):
    id: str
    policy_id: str
    amount: float
    payment_type: PaymentType
    status: PaymentStatus
    payment_method: str | None = None
    payment_date: str
    created_at: str
