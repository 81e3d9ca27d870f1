"""
Google Drive API endpoints for manual documents.
"""

from fastapi import APIRouter, Depends

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.schemas import OkResponse
from knowbase.integrations.drive.client import DriveClient, get_drive_client
from knowbase.integrations.drive.schemas import (
    CopyTemplateRequest,
    CopyTemplateResponse,
    TrashRequest,
)

router = APIRouter(
    prefix="/drive",
    tags=["Drive"],
    dependencies=[Depends(require_admin_key)],
)


@router.post("/copy-template", response_model=CopyTemplateResponse)
async def copy_template(
    data: CopyTemplateRequest,
    client: DriveClient = Depends(get_drive_client),
) -> CopyTemplateResponse:
    """Copy the manual template document and return its edit URL."""
    return await client.copy_template(data.title)


@router.post("/trash", response_model=OkResponse)
async def trash_file(
    data: TrashRequest,
    client: DriveClient = Depends(get_drive_client),
) -> OkResponse:
    """Move a Drive file to the trash."""
    await client.trash_file(data.file_id)
    return OkResponse()
