"""
External link API endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.external_links.dependencies import get_external_link_service
from knowbase.db.external_links.schemas import (
    ExternalLinkListResponse,
    ExternalLinkResponse,
    ExternalLinkUpsert,
)
from knowbase.db.external_links.service import ExternalLinkService
from knowbase.db.schemas import OkResponse

router = APIRouter(prefix="/external-links", tags=["External Links"])


@router.get("", response_model=ExternalLinkListResponse)
async def list_links(
    only_active: bool = Query(default=False, alias="onlyActive"),
    service: ExternalLinkService = Depends(get_external_link_service),
) -> ExternalLinkListResponse:
    """List external links; ?onlyActive=1 hides inactive ones."""
    return ExternalLinkListResponse(links=await service.list_links(only_active))


@router.post(
    "",
    response_model=ExternalLinkResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_key)],
)
async def save_link(
    data: ExternalLinkUpsert,
    service: ExternalLinkService = Depends(get_external_link_service),
) -> ExternalLinkResponse:
    return ExternalLinkResponse(link=await service.save_link(data))


@router.delete(
    "/{link_id}",
    response_model=OkResponse,
    dependencies=[Depends(require_admin_key)],
)
async def delete_link(
    link_id: str,
    service: ExternalLinkService = Depends(get_external_link_service),
) -> OkResponse:
    await service.delete_link(link_id)
    return OkResponse()
