from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from src.service.film_booking.domain.value_object.payment_proof import PaymentProof


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class FetchError(CustomBaseError):
    """Backend unreachable (upstream_status is None) or answered with a non-2xx status"""

    def __init__(self, message: str, *, upstream_status: Optional[int] = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message, 502)

    @property
    def is_rejection(self) -> bool:
        """True when the backend answered, i.e. the request itself was refused."""
        return self.upstream_status is not None

    @property
    def is_conflict(self) -> bool:
        """The backend refused the request as invalid for the current state (400/409)."""
        return self.upstream_status in (400, 409)


class InvalidSelection(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class ReservationConflict(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class PaymentError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 402)


class WalletConnectionError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 503) -> None:
        super().__init__(message, status_code)


class WalletUnavailable(WalletConnectionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class WalletRejected(WalletConnectionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class BlockchainTransactionError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 502)


class NetworkSwitchError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class AlreadyInProgress(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class ReconciliationError(CustomBaseError):
    """
    Paid on-chain, but the backend did not record the payment.

    Never retried automatically: re-running the payment would submit a second
    transaction. Carries the proof needed for manual reconciliation.
    """

    def __init__(
        self,
        message: str,
        *,
        proof: 'PaymentProof',
        reservation_id: Optional[str],
        film_id: str,
        seat_number: int,
    ) -> None:
        self.proof = proof
        self.reservation_id = reservation_id
        self.film_id = film_id
        self.seat_number = seat_number
        super().__init__(message, 500)
