"""
Reservation Hold Manager

Creates 15-minute seat holds against the backend and classifies reservations
by wall-clock comparison. Expiry is detected locally and is advisory: the
backend stays the authority that rejects late payments.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, List, Optional

import anyio
from opentelemetry import trace

from src.platform.exception.exceptions import FetchError, NotFoundError, ReservationConflict
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import CreateReservationRequest
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.app.reservation_book import ReservationBook
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.domain.entity.reservation_entity import (
    HOLD_WINDOW,
    Reservation,
    classify,
    group_by_status,
    remaining_time,
)
from src.service.film_booking.domain.enum.reservation_status import ReservationStatus
from src.service.film_booking.domain.value_object.remaining_time import RemainingTime
from src.service.film_booking.domain.value_object.session_context import SessionContext


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReservationHoldManager:
    def __init__(
        self,
        *,
        session: SessionContext,
        booking_api_client: IBookingApiClient,
        seat_tracker: SeatAvailabilityTracker,
        reservation_book: ReservationBook,
        hold_window: timedelta = HOLD_WINDOW,
        tick_seconds: float = 1.0,
        now_fn: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session = session
        self.booking_api_client = booking_api_client
        self.seat_tracker = seat_tracker
        self.reservation_book = reservation_book
        self.hold_window = hold_window
        self.tick_seconds = tick_seconds
        self.now_fn = now_fn
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def create_hold(
        self, *, film_id: str, seat_number: int, user_id: Optional[str] = None
    ) -> Reservation:
        """
        Create an unverified reservation (the 15-minute hold)

        Never retried: a silent retry could hold the seat twice.

        Raises:
            ReservationConflict: seat already booked locally, or the backend refused the hold (400/409)
            FetchError: backend unreachable or any other non-2xx answer
        """
        user_id = user_id or self.session.user_id
        if self.seat_tracker.is_booked(film_id=film_id, seat_number=seat_number):
            raise ReservationConflict(f'Seat {seat_number} is already booked')

        with self.tracer.start_as_current_span(
            'hold.create',
            attributes={'film.id': film_id, 'seat.number': seat_number},
        ):
            try:
                reservation = await self.booking_api_client.create_reservation(
                    session=self.session,
                    request=CreateReservationRequest(
                        user_id=user_id,
                        film_id=film_id,
                        seat_number=seat_number,
                        blockchain_verified=False,
                    ),
                )
            except FetchError as e:
                if not e.is_conflict:
                    # Auth failures and backend outages say nothing about the seat
                    raise
                # Seat most likely taken concurrently; show the caller current availability
                await self.seat_tracker.refresh(film_id=film_id)
                raise ReservationConflict(
                    f'Seat {seat_number} could not be held: {e.message}'
                ) from e

        self.seat_tracker.mark_booked(film_id=film_id, seat_number=seat_number)
        self.reservation_book.record(reservation)
        Logger.base.info(
            f'[HOLD] Reservation {reservation.id} holds seat {seat_number} of film {film_id} '
            f'until {reservation.effective_expires_at(self.hold_window)}'
        )
        return reservation

    def get_remaining_time(
        self, reservation: Reservation, now: Optional[datetime] = None
    ) -> RemainingTime:
        return remaining_time(
            reservation, now or self.now_fn(), hold_window=self.hold_window
        )

    def classify(self, reservation: Reservation, now: Optional[datetime] = None) -> ReservationStatus:
        return classify(reservation, now or self.now_fn(), hold_window=self.hold_window)

    def group_by_status(
        self, reservations: List[Reservation], now: Optional[datetime] = None
    ) -> Dict[ReservationStatus, List[Reservation]]:
        return group_by_status(reservations, now or self.now_fn(), hold_window=self.hold_window)

    @Logger.io
    async def list_reservations(self, *, user_id: Optional[str] = None) -> List[Reservation]:
        """GET /reservations/{userId}; every listed reservation refreshes the local book."""
        reservations = await self.booking_api_client.list_user_reservations(
            session=self.session, user_id=user_id or self.session.user_id
        )
        for reservation in reservations:
            self.reservation_book.record(reservation)
        return reservations

    def record(self, reservation: Reservation) -> Reservation:
        return self.reservation_book.record(reservation)

    def get(self, reservation_id: str) -> Optional[Reservation]:
        return self.reservation_book.get(reservation_id)

    async def find(self, *, reservation_id: str) -> Reservation:
        """
        Local reservation, or the caller's backend list when it is not known locally

        Raises:
            NotFoundError: the reservation does not belong to the session's user
        """
        reservation = self.get(reservation_id)
        if reservation is None:
            reservations = await self.list_reservations()
            reservation = next((r for r in reservations if r.id == reservation_id), None)
        if reservation is None or reservation.user_id != self.session.user_id:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        return reservation

    async def countdown(self, reservation: Reservation) -> AsyncIterator[RemainingTime]:
        """
        Yield the remaining hold time every tick while the reservation is pending

        Stops after yielding once more when it leaves the pending bucket
        (paid or expired). Re-reads the local book on every tick so a payment
        made meanwhile ends the countdown.
        """
        while True:
            current = self.get(reservation.id) or reservation
            yield self.get_remaining_time(current)
            if self.classify(current) is not ReservationStatus.PENDING:
                return
            await anyio.sleep(self.tick_seconds)
