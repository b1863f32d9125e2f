"""
Payment Domain Models

Request payload for charging a buyer through the payment gateway.
Amounts are integers in the currency's smallest unit (cents for usd).
"""
from pydantic import BaseModel, ConfigDict, Field


class PaymentCreate(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")
    currency: str = Field("usd", min_length=3, max_length=3, description="ISO 4217 currency code")
    payment_method_id: str = Field(..., alias="paymentMethodId", min_length=1)

    model_config = ConfigDict(populate_by_name=True)
