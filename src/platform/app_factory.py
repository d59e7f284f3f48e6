"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.service.film_booking.driving_adapter.http_controller.error_notification_handler import (
    register_booking_error_handlers,
)
from src.service.film_booking.driving_adapter.http_controller.film_controller import (
    router as film_router,
)
from src.service.film_booking.driving_adapter.http_controller.reservation_controller import (
    router as reservation_router,
)
from src.service.film_booking.driving_adapter.http_controller.wallet_controller import (
    router as wallet_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]] | None = None,
    title_suffix: str = '',
    description: str = 'Film booking session API',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    # Generic handlers first; booking handlers add user-facing notifications on top
    register_exception_handlers(app)
    register_booking_error_handlers(app)

    app.include_router(film_router, prefix='/api/film', tags=['film'])
    app.include_router(reservation_router, prefix='/api/reservations', tags=['reservation'])
    app.include_router(wallet_router, prefix='/api/wallet', tags=['wallet'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}
