"""
Contact API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.contacts.schemas import (
    ContactListResponse,
    ContactResponse,
    ContactUpsert,
)
from knowbase.db.contacts.dependencies import get_contact_service
from knowbase.db.contacts.service import ContactService
from knowbase.db.schemas import OkResponse

router = APIRouter(prefix="/contacts", tags=["Contacts"])


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    service: ContactService = Depends(get_contact_service),
) -> ContactListResponse:
    """List contacts ordered by name."""
    return ContactListResponse(contacts=await service.list_contacts())


@router.post(
    "",
    response_model=ContactResponse,
    dependencies=[Depends(require_admin_key)],
)
async def save_contact(
    data: ContactUpsert,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    return ContactResponse(contact=await service.save_contact(data))


@router.delete(
    "",
    response_model=OkResponse,
    dependencies=[Depends(require_admin_key)],
)
async def delete_contact(
    contact_id: str | None = Query(default=None, alias="contactId"),
    service: ContactService = Depends(get_contact_service),
) -> OkResponse:
    if not contact_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="contactId is required"
        )
    await service.delete_contact(contact_id)
    return OkResponse()
