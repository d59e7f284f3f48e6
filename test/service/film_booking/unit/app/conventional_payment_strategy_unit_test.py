from unittest.mock import AsyncMock, MagicMock

import pytest

from src.platform.exception.exceptions import FetchError, PaymentError
from src.service.film_booking.app.payment_strategy import ConventionalPaymentStrategy
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage


class TestConventionalPaymentStrategy:
    @pytest.fixture
    def booking_api_client(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def strategy(self, booking_api_client: AsyncMock) -> ConventionalPaymentStrategy:
        return ConventionalPaymentStrategy(booking_api_client=booking_api_client)

    @pytest.mark.asyncio
    async def test_uses_backend_confirmed_reservation(
        self, strategy, booking_api_client: AsyncMock, make_reservation, film, session
    ) -> None:
        reservation = make_reservation()
        confirmed = reservation.mark_as_verified()
        booking_api_client.submit_payment.return_value = confirmed
        report_stage = MagicMock()

        result = await strategy.complete_payment(
            session=session, reservation=reservation, film=film, report_stage=report_stage
        )

        assert result.reservation is confirmed
        assert result.method is PaymentMethod.CONVENTIONAL
        assert result.proof is None
        report_stage.assert_called_once_with(PaymentStage.CONFIRMING_PAYMENT)
        booking_api_client.submit_payment.assert_awaited_once()
        assert booking_api_client.submit_payment.await_args.kwargs['reservation_id'] == reservation.id

    @pytest.mark.asyncio
    async def test_unverified_backend_answer_is_marked_verified_locally(
        self, strategy, booking_api_client: AsyncMock, make_reservation, film, session
    ) -> None:
        reservation = make_reservation()
        booking_api_client.submit_payment.return_value = reservation

        result = await strategy.complete_payment(
            session=session, reservation=reservation, film=film, report_stage=MagicMock()
        )

        assert result.reservation.verified

    @pytest.mark.asyncio
    async def test_backend_rejection_becomes_payment_error(
        self, strategy, booking_api_client: AsyncMock, make_reservation, film, session
    ) -> None:
        booking_api_client.submit_payment.side_effect = FetchError(
            'Reservation expired', upstream_status=400
        )

        with pytest.raises(PaymentError, match='Reservation expired'):
            await strategy.complete_payment(
                session=session, reservation=make_reservation(), film=film, report_stage=MagicMock()
            )

    @pytest.mark.asyncio
    async def test_unreachable_backend_keeps_fetch_error(
        self, strategy, booking_api_client: AsyncMock, make_reservation, film, session
    ) -> None:
        booking_api_client.submit_payment.side_effect = FetchError('Backend unreachable')

        with pytest.raises(FetchError):
            await strategy.complete_payment(
                session=session, reservation=make_reservation(), film=film, report_stage=MagicMock()
            )
