"""
Brand, dept and group API endpoints.

The three lists share one shape, so their routers are built from a
`ReferenceKind` describing the table, the key and what to do when the
table cannot be read.
"""

from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException, Request, status

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.constants import ENTITY_KEYS, Entity
from knowbase.db.exceptions import DocumentStoreError
from knowbase.db.reference.constants import FALLBACK_BRANDS, FALLBACK_GROUPS
from knowbase.db.reference.schemas import (
    Brand,
    BrandListResponse,
    Dept,
    DeptListResponse,
    Group,
    GroupListResponse,
    ReferenceItem,
    ReferenceListResponse,
)
from knowbase.db.reference.service import ReferenceListService, build_reference_service
from knowbase.db.schemas import OkResponse
from knowbase.utils.logger import logger


@dataclass(frozen=True)
class ReferenceKind:
    entity: Entity
    collection: str
    model: type[ReferenceItem]
    list_response: type[ReferenceListResponse]
    # None means a failed scan is an error
    fallback: list[ReferenceItem] | None = None

    @property
    def key_name(self) -> str:
        return ENTITY_KEYS[self.entity]


BRANDS = ReferenceKind(
    Entity.BRANDS, "brands", Brand, BrandListResponse, fallback=FALLBACK_BRANDS
)
DEPTS = ReferenceKind(Entity.DEPTS, "depts", Dept, DeptListResponse)
GROUPS = ReferenceKind(
    Entity.GROUPS, "groups", Group, GroupListResponse, fallback=FALLBACK_GROUPS
)


def build_reference_router(kind: ReferenceKind) -> APIRouter:
    """Create the GET/POST/DELETE router for one reference list."""
    router = APIRouter(prefix=f"/{kind.collection}", tags=["Reference Lists"])

    async def get_service() -> ReferenceListService:
        return build_reference_service(kind.entity, kind.model)

    @router.get("", response_model=kind.list_response, response_model_exclude_none=True)
    async def list_items(
        service: ReferenceListService = Depends(get_service),
    ) -> ReferenceListResponse:
        try:
            items = await service.list_items()
        except DocumentStoreError as e:
            if kind.fallback is None:
                raise
            logger.warning(
                f"[{kind.collection}] Scan failed, returning fallback list",
                error=str(e),
            )
            return kind.list_response(
                **{kind.collection: kind.fallback},
                error=f"DynamoDB scan failed. Fallback {kind.collection} returned.",
                detail=str(e),
            )
        return kind.list_response(**{kind.collection: items})

    @router.post(
        "",
        response_model=kind.model,
        dependencies=[Depends(require_admin_key)],
    )
    async def save_item(
        data: kind.model,  # type: ignore[valid-type]
        service: ReferenceListService = Depends(get_service),
    ) -> ReferenceItem:
        return await service.save_item(data)

    @router.delete(
        "",
        response_model=OkResponse,
        dependencies=[Depends(require_admin_key)],
    )
    async def delete_item(
        request: Request,
        service: ReferenceListService = Depends(get_service),
    ) -> OkResponse:
        item_id = request.query_params.get(kind.key_name)
        if not item_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{kind.key_name} is required",
            )
        await service.delete_item(item_id)
        return OkResponse()

    return router


brands_router = build_reference_router(BRANDS)
depts_router = build_reference_router(DEPTS)
groups_router = build_reference_router(GROUPS)
