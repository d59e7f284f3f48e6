from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage
from src.service.film_booking.domain.enum.reservation_status import ReservationStatus
from src.service.film_booking.domain.enum.wallet_state import WalletState


__all__ = [
    'PaymentMethod',
    'PaymentStage',
    'ReservationStatus',
    'WalletState',
]
