"""
Service layer shared by the brand, dept and group reference lists.
"""

from knowbase.db.constants import Entity
from knowbase.db.reference.schemas import ReferenceItem
from knowbase.db.repository import DocumentRepository


class ReferenceListService:
    """List, upsert and delete items of one reference table."""

    def __init__(self, repository: DocumentRepository, model: type[ReferenceItem]):
        self.repository = repository
        self.model = model

    async def list_items(self) -> list[ReferenceItem]:
        """List items by sortOrder (unset sorts last), then id."""
        items = [self.model.model_validate(item) for item in await self.repository.scan()]
        items.sort(key=lambda item: item.sort_key())
        return items

    async def save_item(self, item: ReferenceItem) -> ReferenceItem:
        await self.repository.put(item.to_item())
        return item

    async def delete_item(self, item_id: str) -> None:
        await self.repository.delete(item_id)


def build_reference_service(
    entity: Entity, model: type[ReferenceItem]
) -> ReferenceListService:
    return ReferenceListService(DocumentRepository(entity), model)
