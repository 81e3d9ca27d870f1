"""
Dependencies for contact endpoints.
"""

from knowbase.db.contacts.service import ContactService, build_contact_service


async def get_contact_service() -> ContactService:
    """Get contact service instance."""
    return build_contact_service()
