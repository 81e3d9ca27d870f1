"""
Service layer for manuals.
"""

from pydantic import ValidationError

from knowbase.db.constants import Entity
from knowbase.db.manuals.schemas import Manual, ManualUpsert
from knowbase.db.repository import DocumentRepository
from knowbase.utils.dates import today_ymd, within_window
from knowbase.utils.logger import logger


class ManualService:
    """Service for managing manuals in DynamoDB."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository

    async def list_manuals(
        self,
        only_active: bool = False,
        viewer_groups: set[str] | None = None,
        today: str | None = None,
    ) -> list[Manual]:
        """
        List manuals, newest first.

        Args:
            only_active: Keep only manuals whose publication window contains today
            viewer_groups: When given, keep only manuals whose viewScope admits
                one of these groups
            today: Override for the current date (YYYY-MM-DD)
        """
        today = today or today_ymd()
        manuals: list[Manual] = []
        for item in await self.repository.scan():
            try:
                manuals.append(Manual.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "[ManualService] Skipping malformed manual",
                    manual_id=item.get("manualId"),
                    error=str(e),
                )

        if only_active:
            manuals = [m for m in manuals if within_window(m.start_date, m.end_date, today)]
        if viewer_groups is not None:
            manuals = [m for m in manuals if m.is_scoped_for(viewer_groups)]

        manuals.sort(key=lambda m: (m.start_date or "", m.updated_at or ""), reverse=True)
        return manuals

    async def get_manual(self, manual_id: str) -> Manual | None:
        item = await self.repository.get(manual_id)
        return Manual.model_validate(item) if item else None

    async def save_manual(self, data: ManualUpsert) -> Manual:
        """Create or replace a manual; updatedAt defaults to today."""
        manual = Manual.model_validate(data.to_item())
        if not manual.updated_at:
            manual.updated_at = today_ymd()
        await self.repository.put(manual.to_item())
        return manual

    async def delete_manual(self, manual_id: str) -> None:
        await self.repository.delete(manual_id)


def build_manual_service() -> ManualService:
    return ManualService(DocumentRepository(Entity.MANUALS))
