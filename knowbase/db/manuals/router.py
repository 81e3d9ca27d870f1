"""
Manual API endpoints.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from knowbase.auth.dependencies import get_session_user_optional, require_admin_key
from knowbase.auth.schemas import SessionUser
from knowbase.db.manuals.dependencies import get_manual_service
from knowbase.db.manuals.schemas import (
    ManualListResponse,
    ManualResponse,
    ManualSavedResponse,
    ManualUpsert,
)
from knowbase.db.manuals.service import ManualService
from knowbase.db.schemas import OkResponse
from knowbase.integrations.drive.client import DriveClient, download_filename, get_drive_client

router = APIRouter(prefix="/manuals", tags=["Manuals"])


@router.get("", response_model=ManualListResponse)
async def list_manuals(
    only_active: bool = Query(default=False, alias="onlyActive"),
    scoped: bool = Query(default=False),
    session: SessionUser | None = Depends(get_session_user_optional),
    service: ManualService = Depends(get_manual_service),
) -> ManualListResponse:
    """
    List manuals.

    `onlyActive` keeps manuals inside their publication window; `scoped`
    applies viewScope against the signed-in user's groups (admins see all).
    """
    viewer_groups = None
    if scoped and not (session and session.is_admin):
        viewer_groups = set(session.group_ids) if session else set()

    manuals = await service.list_manuals(only_active=only_active, viewer_groups=viewer_groups)
    return ManualListResponse(manuals=manuals)


@router.get("/download")
async def download_manual_file(
    file_id: str | None = Query(default=None, alias="fileId"),
    url: str | None = Query(default=None),
    name: str | None = Query(default=None),
    drive: DriveClient = Depends(get_drive_client),
) -> Response:
    """
    Download a manual's file as an attachment.

    `fileId` fetches a link-shared Drive file; otherwise `url` fetches an
    external link. The attachment name is cleaned and given an extension
    matching the content type.
    """
    if file_id:
        downloaded = await drive.download_shared_file(file_id)
    elif url:
        downloaded = await drive.download_external(url)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No ID or URL provided"
        )

    filename = download_filename(name, downloaded.content_type)
    return Response(
        content=downloaded.content,
        media_type=downloaded.content_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename, safe='')}",
            "Cache-Control": "no-store",
        },
    )


@router.get("/{manual_id}", response_model=ManualResponse)
async def get_manual(
    manual_id: str,
    service: ManualService = Depends(get_manual_service),
) -> ManualResponse:
    manual = await service.get_manual(manual_id)
    if not manual:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manual not found")
    return ManualResponse(manual=manual)


@router.post(
    "",
    response_model=ManualSavedResponse,
    dependencies=[Depends(require_admin_key)],
)
async def create_manual(
    data: ManualUpsert,
    service: ManualService = Depends(get_manual_service),
) -> ManualSavedResponse:
    """Register a manual (upsert by manualId)."""
    manual = await service.save_manual(data)
    return ManualSavedResponse(manual_id=manual.manual_id)


@router.put(
    "",
    response_model=ManualSavedResponse,
    dependencies=[Depends(require_admin_key)],
)
async def update_manual(
    data: ManualUpsert,
    service: ManualService = Depends(get_manual_service),
) -> ManualSavedResponse:
    """Replace a manual (upsert by manualId)."""
    manual = await service.save_manual(data)
    return ManualSavedResponse(manual_id=manual.manual_id)


@router.delete(
    "",
    response_model=OkResponse,
    dependencies=[Depends(require_admin_key)],
)
async def delete_manual(
    manual_id: str | None = Query(default=None, alias="manualId"),
    service: ManualService = Depends(get_manual_service),
) -> OkResponse:
    """Delete a manual by ?manualId=."""
    if not manual_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="manualId is required"
        )
    await service.delete_manual(manual_id)
    return OkResponse()
