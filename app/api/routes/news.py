"""News feed routes."""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Any

from app.api.dependencies import get_ticker_service
from app.core.exceptions import InvalidInput, Unauthorized
from app.services.ticker_service import TickerService

router = APIRouter(tags=["news"])


class PostNewsRequest(BaseModel):
    """Manual news item; `media` becomes the item's image URL."""
    password: Any = None
    title: Any = None
    content: Any = None
    media: Any = None


@router.get("/engine-xie/news")
async def get_news(service: TickerService = Depends(get_ticker_service)):
    """News items, newest first."""
    return service.news()


@router.post("/engine-xie/news")
@router.post("/news")
async def post_news(
    request: PostNewsRequest,
    service: TickerService = Depends(get_ticker_service)
):
    """Add a custom news item."""
    try:
        item = await service.post_news(
            request.password,
            request.title,
            request.content,
            media=request.media
        )
    except Unauthorized as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "news": item.to_dict()}
