"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journal.config import settings
from journal.database import create_db_and_tables
from journal.errors import ValidationFailed, field_errors
from journal.utils.logging import setup_logging
from journal.api import auth, assets, strategies, system, trades


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trade Journal",
    description="Trading journal: strategies, live and backtest trades, performance metrics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Same error shape as facade validation failures: {message, errors: {field: [...]}}."""
    return JSONResponse(
        status_code=422,
        content={"detail": {"message": ValidationFailed.default_message, "errors": field_errors(exc)}},
    )


# Mount routers
app.include_router(auth.router)
app.include_router(strategies.router)
app.include_router(trades.router)
app.include_router(assets.router)
app.include_router(system.router)
