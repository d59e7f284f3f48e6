"""Adds the user-facing notification to every booking error response"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import orjson

from src.platform.exception.exception_handlers import (
    custom_error_handler,
    reconciliation_error_handler,
)
from src.platform.exception.exceptions import CustomBaseError, ReconciliationError
from src.service.film_booking.app.notification import notification_for_error


async def booking_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ReconciliationError):
        response = await reconciliation_error_handler(request, exc)
    else:
        response = await custom_error_handler(request, exc)
    content = orjson.loads(response.body)
    content['notification'] = notification_for_error(exc).to_dict()
    return JSONResponse(status_code=response.status_code, content=content)


def register_booking_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReconciliationError, booking_error_handler)
    app.add_exception_handler(CustomBaseError, booking_error_handler)
