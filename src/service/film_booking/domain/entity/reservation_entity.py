"""
Reservation (ticket) entity and its time-based classification.

A reservation is a seat hold that is either paid (verified) or waiting for
payment until its expiry. The bucket it falls into is never stored: it is
recomputed from (verified, expires_at, now) every time it is needed.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs

from src.service.film_booking.domain.enum.reservation_status import ReservationStatus
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof
from src.service.film_booking.domain.value_object.remaining_time import RemainingTime


HOLD_WINDOW = timedelta(minutes=15)
_ONE_MILLISECOND = timedelta(milliseconds=1)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so backend and local clocks compare."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@attrs.define
class Reservation:
    id: str
    film_id: str
    user_id: str
    seat_number: int
    created_at: datetime = attrs.field(converter=as_utc)
    verified: bool = False
    expires_at: Optional[datetime] = attrs.field(
        default=None, converter=attrs.converters.optional(as_utc)
    )
    block_index: Optional[int] = None
    transaction_hash: Optional[str] = None
    wallet_address: Optional[str] = None
    film_title: Optional[str] = None

    def effective_expires_at(self, hold_window: timedelta = HOLD_WINDOW) -> Optional[datetime]:
        """Expiry of an unpaid hold; derived from created_at when the backend sent none."""
        if self.verified:
            return None
        return self.expires_at or self.created_at + hold_window

    def mark_as_verified(self, proof: Optional[PaymentProof] = None) -> 'Reservation':
        return attrs.evolve(
            self,
            verified=True,
            expires_at=None,
            block_index=proof.block_index if proof else self.block_index,
            transaction_hash=proof.transaction_hash if proof else self.transaction_hash,
            wallet_address=proof.wallet_address if proof else self.wallet_address,
        )


def classify(
    reservation: Reservation, now: datetime, *, hold_window: timedelta = HOLD_WINDOW
) -> ReservationStatus:
    if reservation.verified:
        return ReservationStatus.VERIFIED
    expires_at = reservation.effective_expires_at(hold_window)
    if expires_at is not None and expires_at > as_utc(now):
        return ReservationStatus.PENDING
    return ReservationStatus.EXPIRED


def remaining_time(
    reservation: Reservation, now: datetime, *, hold_window: timedelta = HOLD_WINDOW
) -> RemainingTime:
    expires_at = reservation.effective_expires_at(hold_window)
    if expires_at is None:
        return RemainingTime.zero()

    remaining_ms = (expires_at - as_utc(now)) // _ONE_MILLISECOND
    if remaining_ms <= 0:
        return RemainingTime.zero()

    total_seconds = remaining_ms // 1000
    window_ms = hold_window // _ONE_MILLISECOND
    percent_left = max(0.0, min(100.0, remaining_ms / window_ms * 100))
    return RemainingTime(
        minutes_left=total_seconds // 60,
        seconds_left=total_seconds % 60,
        percent_left=percent_left,
    )


def group_by_status(
    reservations: list[Reservation], now: datetime, *, hold_window: timedelta = HOLD_WINDOW
) -> dict[ReservationStatus, list[Reservation]]:
    groups: dict[ReservationStatus, list[Reservation]] = {status: [] for status in ReservationStatus}
    for reservation in reservations:
        groups[classify(reservation, now, hold_window=hold_window)].append(reservation)
    return groups
