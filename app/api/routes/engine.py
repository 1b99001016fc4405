"""Price snapshot and admin override routes."""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from typing import Any

from app.api.dependencies import get_ticker_service
from app.core.exceptions import InvalidInput, Unauthorized
from app.services.ticker_service import TickerService

router = APIRouter(tags=["engine"])


class OverrideRequest(BaseModel):
    """Admin price override. `newPrice` may be a number or numeric string."""
    model_config = ConfigDict(populate_by_name=True)

    password: Any = None
    new_price: Any = Field(default=None, alias="newPrice")


@router.get("/engine-xie")
async def get_engine(service: TickerService = Depends(get_ticker_service)):
    """Full ticker state (without the admin password)."""
    return service.snapshot()


@router.get("/price")
async def get_price(service: TickerService = Depends(get_ticker_service)):
    """Current quote: price, day and 52-week bounds, volume."""
    return service.quote()


@router.get("/engine-xie/history")
async def get_history(service: TickerService = Depends(get_ticker_service)):
    """Finalized daily candles, oldest first."""
    return service.history()


@router.post("/engine-xie/override")
@router.post("/engine")
async def override_price(
    request: OverrideRequest,
    service: TickerService = Depends(get_ticker_service)
):
    """
    Force the live price.

    403 on a wrong password, 400 if `newPrice` is not a finite number.
    """
    try:
        value = await service.override_price(request.password, request.new_price)
    except Unauthorized as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "newPrice": value}
