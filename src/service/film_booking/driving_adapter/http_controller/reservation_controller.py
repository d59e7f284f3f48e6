from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app import notification
from src.service.film_booking.app.payment_orchestrator import PaymentOrchestrator
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.app.ticket_verifier import TicketVerifier
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.driving_adapter.http_controller.auth.session_auth import (
    get_session_context,
)
from src.service.film_booking.driving_adapter.http_controller.dependencies import (
    get_payment_orchestrator,
    get_reservation_hold_manager,
)
from src.service.film_booking.driving_adapter.http_controller.schema.notification_schema import (
    NotificationResponse,
)
from src.service.film_booking.driving_adapter.http_controller.schema.reservation_schema import (
    CreateHoldRequest,
    HoldResponse,
    PaymentRequest,
    PaymentResponse,
    ReservationGroupsResponse,
    ReservationResponse,
    VerifyTicketResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(hold_manager: ReservationHoldManager, reservation: Reservation) -> ReservationResponse:
    now = hold_manager.now_fn()
    return ReservationResponse.from_entity(
        reservation,
        status=hold_manager.classify(reservation, now),
        remaining=hold_manager.get_remaining_time(reservation, now),
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_hold(
    request: CreateHoldRequest,
    session: SessionContext = Depends(get_session_context),
    hold_manager: ReservationHoldManager = Depends(get_reservation_hold_manager),
) -> HoldResponse:
    with tracer.start_as_current_span('controller.create_hold') as span:
        span.set_attribute('film.id', request.film_id)
        span.set_attribute('seat.number', request.seat_number)
        span.set_attribute('user.id', session.user_id)

        await hold_manager.seat_tracker.ensure_open(film_id=request.film_id)
        reservation = await hold_manager.create_hold(
            film_id=request.film_id, seat_number=request.seat_number
        )
        return HoldResponse(
            reservation=_to_response(hold_manager, reservation),
            notification=NotificationResponse.from_notification(
                notification.hold_created(reservation)
            ),
        )


@router.get('')
@Logger.io
async def list_my_reservations(
    hold_manager: ReservationHoldManager = Depends(get_reservation_hold_manager),
) -> ReservationGroupsResponse:
    """The caller's reservations in pending / verified / expired buckets."""
    reservations = await hold_manager.list_reservations()
    now = hold_manager.now_fn()
    groups = hold_manager.group_by_status(reservations, now)
    return ReservationGroupsResponse(
        **{
            bucket.value: [_to_response(hold_manager, r) for r in members]
            for bucket, members in groups.items()
        }
    )


@router.post('/{reservation_id}/payment')
@Logger.io
@inject
async def pay_reservation(
    reservation_id: str,
    request: PaymentRequest,
    hold_manager: ReservationHoldManager = Depends(get_reservation_hold_manager),
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
    seat_tracker: SeatAvailabilityTracker = Depends(Provide[Container.seat_tracker]),
) -> PaymentResponse:
    with tracer.start_as_current_span('controller.pay_reservation') as span:
        span.set_attribute('reservation.id', reservation_id)
        span.set_attribute('payment.method', request.method.value)

        reservation = await hold_manager.find(reservation_id=reservation_id)
        await seat_tracker.ensure_open(film_id=reservation.film_id)
        film = seat_tracker.get_film(film_id=reservation.film_id)

        result = await orchestrator.complete_payment(
            reservation=reservation, film=film, method=request.method
        )
        now = hold_manager.now_fn()
        return PaymentResponse.from_result(
            result,
            status=hold_manager.classify(result.reservation, now),
            remaining=hold_manager.get_remaining_time(result.reservation, now),
            notification=NotificationResponse.from_notification(
                notification.payment_successful(result.reservation, film)
            ),
        )


@router.get('/verify/{film_id}/{seat_number}')
@Logger.io
@inject
async def verify_ticket(
    film_id: str,
    seat_number: int,
    session: SessionContext = Depends(get_session_context),
    ticket_verifier: TicketVerifier = Depends(Provide[Container.ticket_verifier]),
) -> VerifyTicketResponse:
    verified = await ticket_verifier.verify(
        film_id=film_id, user_id=session.user_id, seat_number=seat_number
    )
    return VerifyTicketResponse(film_id=film_id, seat_number=seat_number, verified=verified)
