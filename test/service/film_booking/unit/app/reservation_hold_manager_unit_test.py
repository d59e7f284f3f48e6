"""
Unit tests for ReservationHoldManager

Tests hold creation (local conflict check, backend rejection, no retry),
reservation lookup and the countdown stream.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import FetchError, NotFoundError, ReservationConflict
from src.service.film_booking.app.dto import FilmDetail
from src.service.film_booking.app.reservation_book import ReservationBook
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.enum.reservation_status import ReservationStatus


class TestCreateHold:
    @pytest.fixture
    def booking_api_client(self, film: Film, make_reservation) -> AsyncMock:
        client = AsyncMock()
        client.get_film.return_value = FilmDetail(film=film, booked_seats=[1])
        client.get_booked_seats.return_value = [1]
        client.create_reservation.return_value = make_reservation(seat_number=7)
        return client

    @pytest.fixture
    def seat_tracker(self, booking_api_client: AsyncMock) -> SeatAvailabilityTracker:
        return SeatAvailabilityTracker(booking_api_client=booking_api_client)

    @pytest.fixture
    def hold_manager(
        self, session, booking_api_client: AsyncMock, seat_tracker: SeatAvailabilityTracker, now
    ) -> ReservationHoldManager:
        return ReservationHoldManager(
            session=session,
            booking_api_client=booking_api_client,
            seat_tracker=seat_tracker,
            reservation_book=ReservationBook(),
            now_fn=lambda: now,
        )

    @pytest.mark.asyncio
    async def test_create_hold_books_seat_locally(
        self,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        booking_api_client: AsyncMock,
        film: Film,
        session,
    ) -> None:
        await seat_tracker.open(film_id=film.id)

        reservation = await hold_manager.create_hold(film_id=film.id, seat_number=7)

        request = booking_api_client.create_reservation.await_args.kwargs['request']
        assert request.to_payload() == {
            'userId': session.user_id,
            'filmId': film.id,
            'seatNumber': 7,
            'blockchainVerified': False,
        }
        assert booking_api_client.create_reservation.await_args.kwargs['session'] == session
        assert seat_tracker.is_booked(film_id=film.id, seat_number=7)
        assert hold_manager.get(reservation.id) == reservation
        assert hold_manager.classify(reservation) is ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_create_hold_on_locally_booked_seat_never_calls_backend(
        self,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        booking_api_client: AsyncMock,
        film: Film,
    ) -> None:
        await seat_tracker.open(film_id=film.id)

        with pytest.raises(ReservationConflict):
            await hold_manager.create_hold(film_id=film.id, seat_number=1)

        booking_api_client.create_reservation.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize('upstream_status', [400, 409])
    async def test_backend_rejection_refreshes_seats_and_raises_conflict(
        self,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        booking_api_client: AsyncMock,
        film: Film,
        upstream_status: int,
    ) -> None:
        await seat_tracker.open(film_id=film.id)
        booking_api_client.create_reservation.side_effect = FetchError(
            'Seat already reserved', upstream_status=upstream_status
        )
        booking_api_client.get_booked_seats.return_value = [1, 7]

        with pytest.raises(ReservationConflict):
            await hold_manager.create_hold(film_id=film.id, seat_number=7)

        # Not retried; availability refreshed from the backend
        booking_api_client.create_reservation.assert_awaited_once()
        assert seat_tracker.is_booked(film_id=film.id, seat_number=7)
        assert len(hold_manager.reservation_book) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize('upstream_status', [401, 403, 500, 503])
    async def test_non_conflict_backend_errors_propagate_without_refresh(
        self,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        booking_api_client: AsyncMock,
        film: Film,
        upstream_status: int,
    ) -> None:
        await seat_tracker.open(film_id=film.id)
        refreshes_before = booking_api_client.get_booked_seats.await_count
        booking_api_client.create_reservation.side_effect = FetchError(
            'Backend refused', upstream_status=upstream_status
        )

        with pytest.raises(FetchError) as exc_info:
            await hold_manager.create_hold(film_id=film.id, seat_number=7)

        assert exc_info.value.upstream_status == upstream_status
        assert booking_api_client.get_booked_seats.await_count == refreshes_before
        assert not seat_tracker.is_booked(film_id=film.id, seat_number=7)

    @pytest.mark.asyncio
    async def test_unreachable_backend_propagates_fetch_error(
        self,
        hold_manager: ReservationHoldManager,
        seat_tracker: SeatAvailabilityTracker,
        booking_api_client: AsyncMock,
        film: Film,
    ) -> None:
        await seat_tracker.open(film_id=film.id)
        booking_api_client.create_reservation.side_effect = FetchError('Backend unreachable')

        with pytest.raises(FetchError):
            await hold_manager.create_hold(film_id=film.id, seat_number=7)

        booking_api_client.create_reservation.assert_awaited_once()
        assert not seat_tracker.is_booked(film_id=film.id, seat_number=7)


class TestReservationLookup:
    @pytest.fixture
    def booking_api_client(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def hold_manager(self, session, booking_api_client: AsyncMock, now) -> ReservationHoldManager:
        return ReservationHoldManager(
            session=session,
            booking_api_client=booking_api_client,
            seat_tracker=SeatAvailabilityTracker(booking_api_client=booking_api_client),
            reservation_book=ReservationBook(),
            now_fn=lambda: now,
        )

    @pytest.mark.asyncio
    async def test_list_reservations_records_every_entry(
        self, hold_manager: ReservationHoldManager, booking_api_client: AsyncMock, make_reservation
    ) -> None:
        listed = [make_reservation(reservation_id='a'), make_reservation(reservation_id='b')]
        booking_api_client.list_user_reservations.return_value = listed

        result = await hold_manager.list_reservations()

        assert result == listed
        assert hold_manager.get('a') == listed[0]
        assert hold_manager.get('b') == listed[1]

    @pytest.mark.asyncio
    async def test_find_uses_local_book_first(
        self, hold_manager: ReservationHoldManager, booking_api_client: AsyncMock, make_reservation
    ) -> None:
        reservation = hold_manager.record(make_reservation())

        assert await hold_manager.find(reservation_id=reservation.id) == reservation
        booking_api_client.list_user_reservations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_falls_back_to_backend_list(
        self, hold_manager: ReservationHoldManager, booking_api_client: AsyncMock, make_reservation
    ) -> None:
        reservation = make_reservation(reservation_id='remote')
        booking_api_client.list_user_reservations.return_value = [reservation]

        assert await hold_manager.find(reservation_id='remote') == reservation

    @pytest.mark.asyncio
    async def test_find_unknown_reservation_raises(
        self, hold_manager: ReservationHoldManager, booking_api_client: AsyncMock
    ) -> None:
        booking_api_client.list_user_reservations.return_value = []

        with pytest.raises(NotFoundError):
            await hold_manager.find(reservation_id='missing')

    @pytest.mark.asyncio
    async def test_find_reservation_of_another_user_raises(
        self, hold_manager: ReservationHoldManager, make_reservation
    ) -> None:
        hold_manager.record(make_reservation(reservation_id='theirs', user_id='user-2'))

        with pytest.raises(NotFoundError):
            await hold_manager.find(reservation_id='theirs')


class TestCountdown:
    @pytest.mark.asyncio
    async def test_countdown_stops_after_expiry(self, session, make_reservation, now) -> None:
        # Every clock read advances one second
        clock = iter([now + timedelta(seconds=s) for s in range(0, 10)])

        def now_fn() -> datetime:
            return next(clock)

        hold_manager = ReservationHoldManager(
            session=session,
            booking_api_client=AsyncMock(),
            seat_tracker=SeatAvailabilityTracker(booking_api_client=AsyncMock()),
            reservation_book=ReservationBook(),
            tick_seconds=0,
            now_fn=now_fn,
        )
        # Two seconds of hold left
        reservation = make_reservation(expires_at=now + timedelta(seconds=2))

        ticks = [remaining async for remaining in hold_manager.countdown(reservation)]

        assert [t.seconds_left for t in ticks] == [2, 0]
        assert ticks[-1].is_zero

    @pytest.mark.asyncio
    async def test_countdown_ends_when_reservation_is_paid(
        self, session, make_reservation, now
    ) -> None:
        hold_manager = ReservationHoldManager(
            session=session,
            booking_api_client=AsyncMock(),
            seat_tracker=SeatAvailabilityTracker(booking_api_client=AsyncMock()),
            reservation_book=ReservationBook(),
            tick_seconds=0,
            now_fn=lambda: now,
        )
        reservation = hold_manager.record(make_reservation())

        ticks = []
        async for remaining in hold_manager.countdown(reservation):
            ticks.append(remaining)
            if len(ticks) == 2:
                hold_manager.record(reservation.mark_as_verified())

        assert len(ticks) == 3
        assert ticks[0].minutes_left == 14
        assert ticks[-1].is_zero
