"""
Payment Orchestrator

Completes payment for a held reservation with one of two interchangeable
strategies and records the verified result locally only after the backend
confirmed it. One attempt per reservation id may be in flight at a time.
"""

from typing import Dict, Optional

from opentelemetry import trace

from src.platform.exception.exceptions import (
    DomainError,
    InvalidSelection,
    PaymentError,
    ReservationConflict,
)
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import PaymentResult
from src.service.film_booking.app.interface.i_payment_strategy import IPaymentStrategy
from src.service.film_booking.app.payment_in_flight_registry import PaymentInFlightRegistry
from src.service.film_booking.app.payment_strategy import (
    ConventionalPaymentStrategy,
    WalletPaymentStrategy,
)
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage
from src.service.film_booking.domain.value_object.session_context import SessionContext


def seat_purchase_key(film_id: str, seat_number: int) -> str:
    return f'{film_id}:{seat_number}'


class PaymentOrchestrator:
    def __init__(
        self,
        *,
        session: SessionContext,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        in_flight_registry: PaymentInFlightRegistry,
        conventional_strategy: ConventionalPaymentStrategy,
        wallet_strategy: WalletPaymentStrategy,
    ) -> None:
        self.session = session
        self.hold_manager = hold_manager
        self.seat_tracker = seat_tracker
        self.in_flight_registry = in_flight_registry
        self.wallet_strategy = wallet_strategy
        self.strategies: Dict[PaymentMethod, IPaymentStrategy] = {
            conventional_strategy.method: conventional_strategy,
            wallet_strategy.method: wallet_strategy,
        }
        self.tracer = trace.get_tracer(__name__)

    def stage(self, key: str) -> Optional[PaymentStage]:
        """Current stage of an in-flight payment (reservation id or film:seat key)."""
        return self.in_flight_registry.stage(key)

    def is_in_flight(self, key: str) -> bool:
        return self.in_flight_registry.is_in_flight(key)

    @Logger.io
    async def complete_payment(
        self, *, reservation: Reservation, film: Film, method: PaymentMethod
    ) -> PaymentResult:
        """
        Pay for a held reservation

        Raises:
            AlreadyInProgress: a payment for this reservation is already in flight
            PaymentError: reservation already verified, or the backend rejected the payment
            WalletConnectionError, NetworkSwitchError, BlockchainTransactionError: wallet path
            ReconciliationError: paid on chain but the backend confirmation failed
        """
        strategy = self.strategies.get(method)
        if strategy is None:
            raise DomainError(f'Unsupported payment method: {method}')
        if reservation.film_id != film.id:
            raise DomainError(f'Reservation {reservation.id} is not for film {film.id}')

        # Claimed before the first await
        with self.in_flight_registry.claim(reservation.id) as report_stage:
            known = self.hold_manager.get(reservation.id)
            if reservation.verified or (known is not None and known.verified):
                raise PaymentError(f'Reservation {reservation.id} is already paid')

            with self.tracer.start_as_current_span(
                'payment.complete',
                attributes={
                    'reservation.id': reservation.id,
                    'payment.method': method.value,
                },
            ):
                result = await strategy.complete_payment(
                    session=self.session,
                    reservation=reservation,
                    film=film,
                    report_stage=report_stage,
                )

        self._record(result)
        return result

    @Logger.io
    async def purchase_seat(self, *, film: Film, seat_number: int) -> PaymentResult:
        """
        Direct wallet purchase of a seat without a prior hold

        Raises:
            InvalidSelection: seat outside the film's capacity
            ReservationConflict: seat already booked
            AlreadyInProgress: a purchase of this seat is already in flight
        """
        if not film.has_seat(seat_number):
            raise InvalidSelection(
                f'Seat {seat_number} does not exist (capacity {film.seat_capacity})'
            )
        if self.seat_tracker.is_booked(film_id=film.id, seat_number=seat_number):
            raise ReservationConflict(f'Seat {seat_number} is already booked')

        with self.in_flight_registry.claim(seat_purchase_key(film.id, seat_number)) as report_stage:
            with self.tracer.start_as_current_span(
                'payment.purchase_seat',
                attributes={'film.id': film.id, 'seat.number': seat_number},
            ):
                result = await self.wallet_strategy.purchase_seat(
                    session=self.session,
                    film=film,
                    seat_number=seat_number,
                    report_stage=report_stage,
                )

        self._record(result)
        return result

    def _record(self, result: PaymentResult) -> None:
        reservation = result.reservation
        self.hold_manager.record(reservation)
        self.seat_tracker.mark_booked(film_id=reservation.film_id, seat_number=reservation.seat_number)
        Logger.base.info(
            f'[PAYMENT] Reservation {reservation.id} paid via {result.method} '
            f'(film={reservation.film_id}, seat={reservation.seat_number}, amount={result.amount})'
        )
