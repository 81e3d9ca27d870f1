"""
Dependencies for external link endpoints.
"""

from knowbase.db.external_links.service import (
    ExternalLinkService,
    build_external_link_service,
)


async def get_external_link_service() -> ExternalLinkService:
    """Get external link service instance."""
    return build_external_link_service()
