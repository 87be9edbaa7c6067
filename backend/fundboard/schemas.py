from pydantic import BaseModel, Field
from typing import List, Literal, get_args
import datetime

PaymentMethod = Literal["venmo", "cashapp", "paypal", "zelle", "manual"]
PAYMENT_METHODS = get_args(PaymentMethod)


class DonationCreate(BaseModel):
    amount: int
    numbers: List[int]
    method: PaymentMethod
    donor_name: str = Field(alias="donorName")
    donor_phone: str = Field(alias="donorPhone")
    donor_address: str = Field(alias="donorAddress")

    model_config = {"populate_by_name": True}


class Donation(BaseModel):
    id: int
    amount: int
    numbers: str
    method: str
    donor_name: str
    donor_phone: str
    donor_address: str
    created_at: datetime.datetime

    model_config = {"from_attributes": True}


class FundraiserStateOut(BaseModel):
    raised: int
    donationCount: int
    goal: int
    bio: str
    takenNumbers: List[int]
