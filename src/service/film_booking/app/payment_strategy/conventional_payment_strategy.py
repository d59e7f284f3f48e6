from src.platform.exception.exceptions import FetchError, PaymentError
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import PaymentDetails, PaymentResult
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.app.interface.i_payment_strategy import (
    IPaymentStrategy,
    StageReporter,
)
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage
from src.service.film_booking.domain.value_object.session_context import SessionContext


class ConventionalPaymentStrategy(IPaymentStrategy):
    """
    Payment confirmed directly by the backend, no external signer

    The confirmation carries only the method tag and amount; no chain proof
    fields are sent for this method.
    """

    method = PaymentMethod.CONVENTIONAL

    def __init__(self, *, booking_api_client: IBookingApiClient) -> None:
        self.booking_api_client = booking_api_client

    @Logger.io
    async def complete_payment(
        self,
        *,
        session: SessionContext,
        reservation: Reservation,
        film: Film,
        report_stage: StageReporter,
    ) -> PaymentResult:
        report_stage(PaymentStage.CONFIRMING_PAYMENT)
        try:
            confirmed = await self.booking_api_client.submit_payment(
                session=session,
                reservation_id=reservation.id,
                payment=PaymentDetails(payment_method=self.method, amount=film.price),
            )
        except FetchError as e:
            if not e.is_rejection:
                raise
            raise PaymentError(e.message) from e

        verified = confirmed if confirmed and confirmed.verified else reservation.mark_as_verified()
        return PaymentResult(reservation=verified, method=self.method, amount=film.price)
