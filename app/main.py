"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.database import create_tables, dispose_engine, init_engine
from app.exceptions import InventoryError
from app.logging_config import configure_logging
from app.routes import (
    addresses,
    assets,
    assignments,
    auth,
    borrowings,
    brands,
    categories,
    company_profile,
    customers,
    history,
    inventory,
    product_models,
    repairs,
    sales,
    suppliers,
    users,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_engine()
    create_tables()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    yield
    dispose_engine()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Inventory management for sale stock, company assets, borrowings and repairs",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def integrity_error_message(exc: IntegrityError) -> str:
    """Turn a database constraint violation into a message for the client."""
    text = str(exc.orig)
    if "UNIQUE" in text.upper() or "duplicate key" in text:
        # sqlite: "UNIQUE constraint failed: customers.customer_code"
        # postgres: 'duplicate key value violates unique constraint "..."' + 'Key (col)=(...)'
        fields = []
        if ":" in text:
            for target in text.split(":", 1)[1].split("\n")[0].split(","):
                fields.append(target.strip().split(".")[-1])
        if "Key (" in text:
            fields = [text.split("Key (", 1)[1].split(")", 1)[0]]
        return f"The following fields must be unique: {', '.join(f for f in fields if f) or 'unknown'}"
    return "Cannot delete or update this record because it is still linked to other data."


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": integrity_error_message(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred on the server."},
    )


# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(brands.router, prefix="/api")
app.include_router(product_models.router, prefix="/api")
app.include_router(suppliers.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(addresses.router, prefix="/api")
app.include_router(inventory.router, prefix="/api")
app.include_router(assets.router, prefix="/api")
app.include_router(sales.router, prefix="/api")
app.include_router(borrowings.router, prefix="/api")
app.include_router(assignments.router, prefix="/api")
app.include_router(repairs.router, prefix="/api")
app.include_router(history.router, prefix="/api")
app.include_router(company_profile.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
