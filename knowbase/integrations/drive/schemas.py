"""Request and response schemas for Drive endpoints."""

from knowbase.db.schemas import CamelModel, RequiredStr


class CopyTemplateRequest(CamelModel):
    title: RequiredStr


class CopyTemplateResponse(CamelModel):
    file_id: str
    edit_url: str | None = None


class TrashRequest(CamelModel):
    file_id: RequiredStr
