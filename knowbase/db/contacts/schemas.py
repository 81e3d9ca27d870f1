"""
Pydantic schemas for staff contacts.
"""

from pydantic import Field

from knowbase.db.constants import ALL_SCOPE
from knowbase.db.schemas import CamelModel, RequiredStr, StringList


class ContactFields(CamelModel):
    email: str = ""
    phone: str | None = None
    role: str | None = None
    brand_id: str = ALL_SCOPE
    dept_id: str = ""
    tags: StringList = Field(default_factory=list)


class Contact(ContactFields):
    contact_id: str
    name: str = ""


class ContactUpsert(ContactFields):
    """Request schema for creating or replacing a contact; contactId is generated when absent."""

    contact_id: str | None = None
    name: RequiredStr


class ContactListResponse(CamelModel):
    contacts: list[Contact]


class ContactResponse(CamelModel):
    ok: bool = True
    contact: Contact
