"""
News API endpoints.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.news.dependencies import get_news_service
from knowbase.db.news.schemas import (
    NewsListResponse,
    NewsResponse,
    NewsWrite,
    NotificationResult,
)
from knowbase.db.news.service import NewsService
from knowbase.db.schemas import OkResponse

router = APIRouter(prefix="/news", tags=["News"])


@router.get("", response_model=NewsListResponse)
async def list_news(
    only_active: bool = Query(default=False, alias="onlyActive"),
    service: NewsService = Depends(get_news_service),
) -> NewsListResponse:
    """List news; onlyActive hides hidden and out-of-window items."""
    return NewsListResponse(news=await service.list_news(only_active=only_active))


@router.post(
    "",
    response_model=NewsResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_key)],
)
async def create_news(
    data: NewsWrite,
    background_tasks: BackgroundTasks,
    service: NewsService = Depends(get_news_service),
) -> NewsResponse:
    """Create a news item, optionally scheduling its notification mail."""
    news = await service.create_news(data)
    if data.notify:
        background_tasks.add_task(service.notify, news.news_id)
    return NewsResponse(news=news)


@router.get("/{news_id}", response_model=NewsResponse)
async def get_news(
    news_id: str,
    service: NewsService = Depends(get_news_service),
) -> NewsResponse:
    news = await service.get_news(news_id)
    if not news:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return NewsResponse(news=news)


@router.put(
    "/{news_id}",
    response_model=NewsResponse,
    dependencies=[Depends(require_admin_key)],
)
async def update_news(
    news_id: str,
    data: NewsWrite,
    background_tasks: BackgroundTasks,
    service: NewsService = Depends(get_news_service),
) -> NewsResponse:
    news = await service.update_news(news_id, data)
    if not news:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    if data.notify:
        background_tasks.add_task(service.notify, news_id)
    return NewsResponse(news=news)


@router.delete(
    "/{news_id}",
    response_model=OkResponse,
    dependencies=[Depends(require_admin_key)],
)
async def delete_news(
    news_id: str,
    service: NewsService = Depends(get_news_service),
) -> OkResponse:
    await service.delete_news(news_id)
    return OkResponse()


@router.post(
    "/{news_id}/notify",
    response_model=NotificationResult,
    dependencies=[Depends(require_admin_key)],
)
async def notify_news(
    news_id: str,
    service: NewsService = Depends(get_news_service),
) -> NotificationResult:
    """Send the notification mail for a news item unless it was already sent."""
    result = await service.notify(news_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return result
