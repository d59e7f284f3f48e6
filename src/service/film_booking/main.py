"""
Film Booking Service - Main Application
Seat selection, reservation holds, payments and wallet state for the booking front-end.

Run: granian src.service.film_booking.main:app --interface asgi --host 0.0.0.0 --port 8100
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('[Film Booking] Starting up...')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('[Film Booking] Dependency injection wired')

    async with anyio.create_task_group() as background_tasks:
        wallet_monitor = container.wallet_monitor()
        background_tasks.start_soon(wallet_monitor.run)
        Logger.base.info('[Film Booking] Wallet monitor started')
        Logger.base.info('[Film Booking] Startup complete')

        yield

        Logger.base.info('[Film Booking] Shutting down...')
        background_tasks.cancel_scope.cancel()

    await cleanup()
    Logger.base.info('[Film Booking] HTTP clients closed')

    container.unwire()
    Logger.base.info('[Film Booking] Shutdown complete')


app = create_app(lifespan=lifespan)
