from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.app.payment_orchestrator import PaymentOrchestrator
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.app import notification
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.driving_adapter.http_controller.auth.session_auth import (
    get_optional_session_context,
    get_session_context,
)
from src.service.film_booking.driving_adapter.http_controller.dependencies import (
    get_payment_orchestrator,
    get_reservation_hold_manager,
)
from src.service.film_booking.driving_adapter.http_controller.schema.film_schema import (
    FilmResponse,
    SeatMapResponse,
)
from src.service.film_booking.driving_adapter.http_controller.schema.notification_schema import (
    NotificationResponse,
)
from src.service.film_booking.driving_adapter.http_controller.schema.reservation_schema import (
    PaymentResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('', response_model=List[FilmResponse])
@Logger.io
@inject
async def list_films(
    booking_api_client: IBookingApiClient = Depends(Provide[Container.booking_api_client]),
) -> List[FilmResponse]:
    films = await booking_api_client.list_films()
    return [FilmResponse.from_entity(film) for film in films]


@router.get('/{film_id}/seats')
@Logger.io
@inject
async def get_seat_map(
    film_id: str,
    refresh: bool = False,
    session: Optional[SessionContext] = Depends(get_optional_session_context),
    seat_tracker: SeatAvailabilityTracker = Depends(Provide[Container.seat_tracker]),
) -> SeatMapResponse:
    """Open the film's seat map on first access; refresh=true reconciles with the backend."""
    if refresh:
        seat_map = await seat_tracker.refresh(film_id=film_id)
    else:
        seat_map = await seat_tracker.ensure_open(film_id=film_id)
    return SeatMapResponse.from_seat_map(seat_map, user_id=session.user_id if session else None)


@router.get('/{film_id}')
@Logger.io
@inject
async def get_film(
    film_id: str,
    seat_tracker: SeatAvailabilityTracker = Depends(Provide[Container.seat_tracker]),
) -> FilmResponse:
    await seat_tracker.ensure_open(film_id=film_id)
    return FilmResponse.from_entity(seat_tracker.get_film(film_id=film_id))


@router.post('/{film_id}/seats/{seat_number}/select')
@Logger.io
@inject
async def select_seat(
    film_id: str,
    seat_number: int,
    session: SessionContext = Depends(get_session_context),
    seat_tracker: SeatAvailabilityTracker = Depends(Provide[Container.seat_tracker]),
) -> SeatMapResponse:
    """Toggle the caller's own selection; other users' picks are untouched."""
    seat_map = await seat_tracker.ensure_open(film_id=film_id)
    seat_tracker.select(film_id=film_id, seat_number=seat_number, user_id=session.user_id)
    return SeatMapResponse.from_seat_map(seat_map, user_id=session.user_id)


@router.post('/{film_id}/seats/{seat_number}/purchase')
@Logger.io
@inject
async def purchase_seat(
    film_id: str,
    seat_number: int,
    session: SessionContext = Depends(get_session_context),
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
    hold_manager: ReservationHoldManager = Depends(get_reservation_hold_manager),
    seat_tracker: SeatAvailabilityTracker = Depends(Provide[Container.seat_tracker]),
) -> PaymentResponse:
    """Direct wallet purchase, no prior hold."""
    with tracer.start_as_current_span('controller.purchase_seat') as span:
        span.set_attribute('film.id', film_id)
        span.set_attribute('seat.number', seat_number)
        span.set_attribute('user.id', session.user_id)

        await seat_tracker.ensure_open(film_id=film_id)
        film = seat_tracker.get_film(film_id=film_id)
        result = await orchestrator.purchase_seat(film=film, seat_number=seat_number)
        return PaymentResponse.from_result(
            result,
            status=hold_manager.classify(result.reservation),
            remaining=hold_manager.get_remaining_time(result.reservation),
            notification=NotificationResponse.from_notification(
                notification.payment_successful(result.reservation, film)
            ),
        )
