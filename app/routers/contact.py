import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.db import dynamo
from app.models.contact import ContactCreate, ContactInDB
from app.routers.auth import get_current_user_id

router = APIRouter()
logger = logging.getLogger(__name__)

THANK_YOU_MESSAGE = "Thank you for your message. We'll get back to you soon."


@router.post("/", status_code=status.HTTP_201_CREATED)
def submit_contact(contact: ContactCreate):
    """Public contact form; no account needed."""
    contact_db = ContactInDB(**contact.model_dump())
    dynamo.put_contact(contact_db.model_dump())
    logger.info(f"Contact message {contact_db.contact_id} received from {contact_db.email}")
    return {"message": THANK_YOU_MESSAGE}


@router.get("/", response_model=List[ContactInDB])
def list_contacts(user_id: str = Depends(get_current_user_id)):
    contacts = dynamo.list_contacts()
    return sorted(contacts, key=lambda item: item["created_at"], reverse=True)
