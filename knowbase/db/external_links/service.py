"""
Service layer for external links.
"""

import uuid

from knowbase.db.constants import Entity
from knowbase.db.external_links.schemas import ExternalLink, ExternalLinkUpsert
from knowbase.db.repository import DocumentRepository
from knowbase.utils.dates import utc_now_iso


class ExternalLinkService:
    """Service for managing external links in DynamoDB."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository

    async def list_links(self, only_active: bool = False) -> list[ExternalLink]:
        """List links by sortOrder (unset sorts last), then title."""
        links = [ExternalLink.model_validate(item) for item in await self.repository.scan()]
        if only_active:
            links = [link for link in links if link.is_active]
        links.sort(key=ExternalLink.sort_key)
        return links

    async def save_link(self, data: ExternalLinkUpsert) -> ExternalLink:
        """
        Create or replace a link.

        A new id is generated when none is given. createdAt is taken from the
        request, then from the stored record, then set to now.
        """
        link_id = data.link_id or str(uuid.uuid4())
        now = utc_now_iso()
        created_at = data.created_at
        if not created_at and data.link_id:
            existing = await self.repository.get(link_id)
            created_at = existing.get("createdAt") if existing else None

        link = ExternalLink.model_validate(
            {
                **data.to_item(),
                "linkId": link_id,
                "createdAt": created_at or now,
                "updatedAt": now,
            }
        )
        await self.repository.put(link.to_item())
        return link

    async def delete_link(self, link_id: str) -> None:
        await self.repository.delete(link_id)


def build_external_link_service() -> ExternalLinkService:
    return ExternalLinkService(DocumentRepository(Entity.EXTERNAL_LINKS))
