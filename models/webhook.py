# models/webhook.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class ClerkEmailAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email_address: Optional[str] = None


class ClerkPhoneNumber(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    phone_number: Optional[str] = None


class ClerkUserData(BaseModel):
    """
    The subset of Clerk's user object the sync handler reads.
    user.deleted payloads only carry id (and deleted=True).
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_addresses: List[ClerkEmailAddress] = []
    phone_numbers: List[ClerkPhoneNumber] = []
    primary_email_address_id: Optional[str] = None
    primary_phone_number_id: Optional[str] = None


class ClerkWebhookEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    object: Optional[str] = None
    data: Dict[str, Any] = {}
