"""
Service layer for staff contacts.
"""

import uuid

from knowbase.db.constants import Entity
from knowbase.db.contacts.schemas import Contact, ContactUpsert
from knowbase.db.repository import DocumentRepository


class ContactService:
    """Service for managing contacts in DynamoDB."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository

    async def list_contacts(self) -> list[Contact]:
        contacts = [Contact.model_validate(item) for item in await self.repository.scan()]
        contacts.sort(key=lambda c: c.name)
        return contacts

    async def save_contact(self, data: ContactUpsert) -> Contact:
        contact = Contact.model_validate(
            {**data.to_item(), "contactId": data.contact_id or str(uuid.uuid4())}
        )
        await self.repository.put(contact.to_item())
        return contact

    async def delete_contact(self, contact_id: str) -> None:
        await self.repository.delete(contact_id)


def build_contact_service() -> ContactService:
    return ContactService(DocumentRepository(Entity.CONTACTS))
