"""FastAPI application exposing the simulated ticker."""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.providers.pexels import get_image_provider
from app.scheduler.main import TickerScheduler
from app.services import TickerService
import logging
import time
import sys

# Import routers
from app.api.routes import engine, news, transactions, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Engine Xie Ticker API", version="1.0.0")


@app.on_event("startup")
async def startup_event():
    """Load state, then start the price and news timers."""
    logger.info("Application starting up...")

    image_provider = get_image_provider()
    service = TickerService.from_settings(settings, image_provider=image_provider)
    app.state.ticker_service = service

    logger.info(
        f"Loaded {service.state.symbol} at {service.state.current_price:.2f} "
        f"(model: {settings.price_model}, timezone: {settings.exchange_timezone})"
    )

    scheduler = TickerScheduler(
        service,
        tick_interval_seconds=settings.tick_interval_seconds,
        news_check_interval_seconds=settings.news_check_interval_seconds
    )
    scheduler.start()
    app.state.ticker_scheduler = scheduler

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop timers and release the image provider."""
    scheduler = getattr(app.state, "ticker_scheduler", None)
    if scheduler is not None:
        scheduler.shutdown()

    service = getattr(app.state, "ticker_service", None)
    if service is not None:
        await service.image_provider.close()

    logger.info("Application shutdown complete")


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests and responses."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")
    logger.debug(f"  Query params: {dict(request.query_params)}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(f"← {request.method} {request.url.path} - Status: {response.status_code} - Time: {process_time:.3f}s")

        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"← {request.method} {request.url.path} - ERROR after {process_time:.3f}s: {str(e)}")
        raise


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400, not 422)."""
    logger.warning(f"Rejected body for {request.method} {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request body", "errors": jsonable_encoder(exc.errors())}
    )


# Add global exception handler to ensure CORS headers are sent even on errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions and ensure CORS headers are sent."""
    logger.error(f"Unhandled exception in {request.method} {request.url.path}")
    logger.error(f"Exception message: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": str(exc) if settings.log_level == "DEBUG" else "Internal server error"
        },
        headers={
            "Access-Control-Allow-Origin": request.headers.get("origin", "*"),
            "Access-Control-Allow-Credentials": "true",
        }
    )

# Configure CORS
logger.info(f"Configuring CORS with origins: {settings.cors_origins_list}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(engine.router)
app.include_router(news.router)
app.include_router(transactions.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Service banner."""
    return {"status": "ok", "service": "engine-xie-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
