"""Film booking application DTOs"""

from src.service.film_booking.app.dto.film_detail_dto import FilmDetail
from src.service.film_booking.app.dto.payment_result_dto import PaymentResult
from src.service.film_booking.app.dto.reservation_dto import (
    CreateReservationRequest,
    PaymentDetails,
)
from src.service.film_booking.app.dto.wallet_state_dto import WalletStateChanged


__all__ = [
    'CreateReservationRequest',
    'FilmDetail',
    'PaymentDetails',
    'PaymentResult',
    'WalletStateChanged',
]
