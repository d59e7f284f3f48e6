"""
User-facing notifications

Every failure kind gets its own title so the user can tell a wallet problem
from a chain problem from a backend problem.
"""

from typing import Dict, Type

import attrs

from src.platform.exception.exceptions import (
    AlreadyInProgress,
    BlockchainTransactionError,
    CustomBaseError,
    FetchError,
    InvalidSelection,
    NetworkSwitchError,
    PaymentError,
    ReconciliationError,
    ReservationConflict,
    WalletConnectionError,
    WalletRejected,
    WalletUnavailable,
)
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.entity.wallet_session_entity import shorten_address


@attrs.frozen
class Notification:
    title: str
    description: str
    variant: str = 'default'  # 'default' | 'destructive'

    def to_dict(self) -> dict:
        return attrs.asdict(self)


# Most specific first; subclasses must precede their bases
_ERROR_TITLES: Dict[Type[CustomBaseError], str] = {
    ReconciliationError: 'Payment needs attention',
    WalletUnavailable: 'Wallet not found',
    WalletRejected: 'Wallet connection rejected',
    WalletConnectionError: 'Wallet connection failed',
    NetworkSwitchError: 'Wrong network',
    BlockchainTransactionError: 'Transaction failed',
    PaymentError: 'Payment failed',
    ReservationConflict: 'Seat unavailable',
    InvalidSelection: 'Seat not selectable',
    AlreadyInProgress: 'Payment in progress',
    FetchError: 'Connection problem',
}


def notification_for_error(error: Exception) -> Notification:
    if isinstance(error, ReconciliationError):
        proof = error.proof
        block = f'block {proof.block_index}' if proof.block_index is not None else 'unconfirmed'
        return Notification(
            title=_ERROR_TITLES[ReconciliationError],
            description=(
                f'{error.message} Transaction {proof.transaction_hash} '
                f'({block}) from {shorten_address(proof.wallet_address)}.'
            ),
            variant='destructive',
        )
    for error_type, title in _ERROR_TITLES.items():
        if isinstance(error, error_type):
            return Notification(title=title, description=error.message, variant='destructive')
    if isinstance(error, CustomBaseError):
        return Notification(title='Error', description=error.message, variant='destructive')
    return Notification(
        title='Error', description='An unexpected error occurred', variant='destructive'
    )


def hold_created(reservation: Reservation) -> Notification:
    return Notification(
        title='Seat reserved',
        description=(
            f'Seat #{reservation.seat_number} is held for you. '
            'You have 15 minutes to complete your payment.'
        ),
    )


def wallet_connected(address: str) -> Notification:
    return Notification(title='Wallet connected', description=f'Connected to {shorten_address(address)}')


def payment_successful(reservation: Reservation, film: Film) -> Notification:
    return Notification(
        title='Payment successful',
        description=f'Your ticket for {film.name}, seat #{reservation.seat_number}, is confirmed.',
    )
