"""Application configuration and router setup."""

import logging
import time
import uuid
from typing import Optional

import fastapi
from fastapi import Request
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi

from components.core import init_db
from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.errors import register_exception_handlers
from restapi.endpoints import (
    analytics,
    auth,
    budgets,
    dashboard,
    expenses,
    health_check,
    savings,
    subscriptions,
)

logger = logging.getLogger("restapi.access")

OPENAPI_TAGS = [
    {"name": "authentication", "description": "Signup, login and profile"},
    {"name": "budgets", "description": "Spending budgets"},
    {"name": "expenses", "description": "Day to day expenses and CSV import"},
    {"name": "savings", "description": "Income, recurring outflows and the monthly savings budget"},
    {"name": "subscriptions", "description": "Paid services, optionally linked to the savings plan"},
    {"name": "dashboard", "description": "Headline figures across all modules"},
    {"name": "analytics", "description": "Monthly and yearly expense analytics"},
]


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = fastapi.FastAPI(
        title=settings.SERVICE_NAME,
        description="Personal finance tracker: budgets, expenses, savings plan and subscriptions",
        version="1.0.0",
        lifespan=init_db.lifespan,
    )

    # Initialize database
    init_db.init_db(app, db_manager)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router, prefix=settings.API_PREFIX)
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(budgets.router, prefix=settings.API_PREFIX)
    app.include_router(expenses.router, prefix=settings.API_PREFIX)
    app.include_router(savings.router, prefix=settings.API_PREFIX)
    app.include_router(subscriptions.router, prefix=settings.API_PREFIX)
    app.include_router(dashboard.router, prefix=settings.API_PREFIX)
    app.include_router(analytics.router, prefix=settings.API_PREFIX)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=settings.SERVICE_NAME,
            version=app.version,
            description=app.description,
            routes=app.routes,
            tags=OPENAPI_TAGS,
        )
        openapi_schema["info"]["x-api-version"] = settings.API_VERSION
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
