"""
Dependencies for manual endpoints.
"""

from knowbase.db.manuals.service import ManualService, build_manual_service


async def get_manual_service() -> ManualService:
    """Get manual service instance."""
    return build_manual_service()
