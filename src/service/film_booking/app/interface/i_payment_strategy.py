"""
Payment Strategy Interface

One capability, "complete payment for a held seat", with interchangeable
implementations (conventional, wallet).
"""

from abc import ABC, abstractmethod
from typing import Callable

from src.service.film_booking.app.dto import PaymentResult
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage
from src.service.film_booking.domain.value_object.session_context import SessionContext


StageReporter = Callable[[PaymentStage], None]


class IPaymentStrategy(ABC):
    method: PaymentMethod

    @abstractmethod
    async def complete_payment(
        self,
        *,
        session: SessionContext,
        reservation: Reservation,
        film: Film,
        report_stage: StageReporter,
    ) -> PaymentResult:
        """
        Pay for an unverified reservation and record it with the backend

        Returns:
            PaymentResult whose reservation is verified; only produced after the
            backend confirmed the payment
        """
        pass
