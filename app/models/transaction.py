from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from app.models.common import TrimmedStr, to_utc, utcnow


class Category(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    SHOPPING = "Shopping"
    INCOME = "Income"
    OTHER = "Other"


class TransactionCreate(BaseModel):
    name: TrimmedStr = Field(min_length=1)
    amount: float = Field(allow_inf_nan=False)
    date: Optional[datetime] = None
    category: Category
    notes: Optional[TrimmedStr] = None


class TransactionUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""

    name: Optional[TrimmedStr] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    date: Optional[datetime] = None
    category: Optional[Category] = None
    notes: Optional[TrimmedStr] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in ("name", "amount", "date", "category"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def to_updates(self) -> dict:
        updates = self.model_dump(exclude_unset=True)
        if "date" in updates:
            updates["date"] = to_utc(updates["date"]).isoformat()
        if "category" in updates:
            updates["category"] = updates["category"].value
        return updates


class TransactionInDB(BaseModel):
    transaction_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    name: str
    amount: float
    date: str = Field(default_factory=lambda: utcnow().isoformat())
    category: Category
    notes: Optional[str] = None
    created_at: str = Field(default_factory=lambda: utcnow().isoformat())

    def to_item(self) -> dict:
        return self.model_dump(mode="json")


class TransactionPublic(BaseModel):
    transaction_id: str
    name: str
    amount: float
    date: str
    category: Category
    notes: Optional[str] = None
    created_at: str
