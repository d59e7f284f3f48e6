from typing import Optional

import attrs

from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof


@attrs.define
class PaymentResult:
    reservation: Reservation  # verified=True, as confirmed by the backend
    method: PaymentMethod
    amount: float
    proof: Optional[PaymentProof] = None
