"""Shared FastAPI dependencies."""
from fastapi import HTTPException, Request, status

from app.services.ticker_service import TickerService


def get_ticker_service(request: Request) -> TickerService:
    """Return the TickerService created at startup."""
    service = getattr(request.app.state, "ticker_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ticker service not ready"
        )
    return service
