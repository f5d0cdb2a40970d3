from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field

from app.models.common import TrimmedStr, utcnow


class ContactCreate(BaseModel):
    name: TrimmedStr = Field(min_length=1)
    email: EmailStr
    subject: TrimmedStr = Field(min_length=1)
    message: TrimmedStr = Field(min_length=1)


class ContactInDB(BaseModel):
    contact_id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr
    subject: str
    message: str
    created_at: str = Field(default_factory=lambda: utcnow().isoformat())
