"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from subledger.core.config import settings
from subledger.core.errors import SubscriptionError
from subledger.core.logging import get_logger, setup_logging
from subledger.api.routes import health
from subledger.api.routes.subscriptions import router as subscriptions_router
from subledger.db.session import init_db
from subledger.services.store import OwnerSlot

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started (owner=%s)", settings.PROJECT_NAME, app.state.owner.owner)
    yield


# Create FastAPI app
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Time-bounded subscription records for a single service owner",
    version=settings.VERSION,
    lifespan=lifespan,
)

# Owner identity lives for the lifetime of this instance
app.state.owner = OwnerSlot(settings.OWNER_ID)

# CORS middleware (configure as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SubscriptionError)
async def subscription_error_handler(request: Request, exc: SubscriptionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(subscriptions_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}
