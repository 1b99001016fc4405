"""Buy/Sell transaction log route."""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Any

from app.api.dependencies import get_ticker_service
from app.core.exceptions import InvalidInput
from app.services.ticker_service import TickerService

router = APIRouter(tags=["transactions"])


class TransactionRequest(BaseModel):
    """Logged trade. Validated by the ticker engine, not here."""
    type: Any = None
    quantity: Any = None
    price: Any = None


@router.post("/transaction")
async def record_transaction(
    request: TransactionRequest,
    service: TickerService = Depends(get_ticker_service)
):
    """Append a Buy/Sell line to the transaction log. Does not move the price."""
    try:
        line = await service.record_transaction(request.type, request.quantity, request.price)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "transaction": line}
