"""
Unit tests for SeatAvailabilityTracker

Tests the booked-seat source selection (embedded vs dedicated endpoint), the
fallback to an empty set when booked seats cannot be read, and refresh
reconciliation.
"""

from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import FetchError, InvalidSelection, NotFoundError
from src.service.film_booking.app.dto import FilmDetail
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.domain.entity.film_entity import Film


class TestSeatAvailabilityTracker:
    @pytest.fixture
    def booking_api_client(self, film: Film) -> AsyncMock:
        client = AsyncMock()
        client.get_film.return_value = FilmDetail(film=film)
        client.get_booked_seats.return_value = [1, 2]
        return client

    @pytest.fixture
    def tracker(self, booking_api_client: AsyncMock) -> SeatAvailabilityTracker:
        return SeatAvailabilityTracker(booking_api_client=booking_api_client)

    @pytest.mark.asyncio
    async def test_open_uses_dedicated_endpoint_when_detail_has_no_seats(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        seat_map = await tracker.open(film_id=film.id)

        booking_api_client.get_booked_seats.assert_awaited_once_with(film_id=film.id)
        assert seat_map.booked == frozenset({1, 2})
        assert seat_map.seat_capacity == film.seat_capacity
        assert tracker.get_film(film_id=film.id) == film

    @pytest.mark.asyncio
    async def test_open_prefers_reservations_embedded_in_detail(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        booking_api_client.get_film.return_value = FilmDetail(film=film, booked_seats=[9])

        seat_map = await tracker.open(film_id=film.id)

        booking_api_client.get_booked_seats.assert_not_awaited()
        assert seat_map.booked == frozenset({9})

    @pytest.mark.asyncio
    async def test_booked_seats_failure_defaults_to_none_booked(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        booking_api_client.get_booked_seats.side_effect = FetchError('boom', upstream_status=500)

        seat_map = await tracker.open(film_id=film.id)

        assert seat_map.booked == frozenset()

    @pytest.mark.asyncio
    async def test_film_load_failure_propagates(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        booking_api_client.get_film.side_effect = FetchError('unreachable')

        with pytest.raises(FetchError):
            await tracker.open(film_id=film.id)

        with pytest.raises(NotFoundError):
            tracker.seat_map(film_id=film.id)

    @pytest.mark.asyncio
    async def test_load_booked_seats_propagates_fetch_error(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        booking_api_client.get_booked_seats.side_effect = FetchError('unreachable')

        with pytest.raises(FetchError):
            await tracker.load_booked_seats(film_id=film.id)

    @pytest.mark.asyncio
    async def test_refresh_reconciles_open_seat_map(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        await tracker.open(film_id=film.id)
        tracker.mark_booked(film_id=film.id, seat_number=5)
        booking_api_client.get_booked_seats.return_value = [1, 2, 3, 5]

        seat_map = await tracker.refresh(film_id=film.id)

        assert seat_map.booked == frozenset({1, 2, 3, 5})
        assert seat_map.optimistic_booked == frozenset()
        # Film is loaded only once
        booking_api_client.get_film.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refresh_of_unopened_film_opens_it(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        seat_map = await tracker.refresh(film_id=film.id)

        booking_api_client.get_film.assert_awaited_once_with(film_id=film.id)
        assert seat_map.booked == frozenset({1, 2})

    @pytest.mark.asyncio
    async def test_open_again_rebuilds_the_map(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        await tracker.open(film_id=film.id)
        tracker.mark_booked(film_id=film.id, seat_number=5)
        booking_api_client.get_booked_seats.return_value = [1]

        seat_map = await tracker.open(film_id=film.id)

        assert seat_map.booked == frozenset({1})

    @pytest.mark.asyncio
    async def test_ensure_open_reuses_open_map(
        self, tracker: SeatAvailabilityTracker, booking_api_client: AsyncMock, film: Film
    ) -> None:
        first = await tracker.ensure_open(film_id=film.id)
        second = await tracker.ensure_open(film_id=film.id)

        assert first is second
        booking_api_client.get_film.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_select_rejects_booked_seat(
        self, tracker: SeatAvailabilityTracker, film: Film
    ) -> None:
        await tracker.open(film_id=film.id)

        with pytest.raises(InvalidSelection):
            tracker.select(film_id=film.id, seat_number=1, user_id='user-1')
        assert tracker.select(film_id=film.id, seat_number=3, user_id='user-1') == 3

    @pytest.mark.asyncio
    async def test_users_selecting_same_seat_keep_their_own_selection(
        self, tracker: SeatAvailabilityTracker, film: Film
    ) -> None:
        await tracker.open(film_id=film.id)

        tracker.select(film_id=film.id, seat_number=5, user_id='alice')
        tracker.select(film_id=film.id, seat_number=5, user_id='bob')

        assert tracker.selected_seat(film_id=film.id, user_id='alice') == 5
        assert tracker.selected_seat(film_id=film.id, user_id='bob') == 5

        # Bob deselecting leaves Alice's pick alone
        tracker.select(film_id=film.id, seat_number=5, user_id='bob')
        assert tracker.selected_seat(film_id=film.id, user_id='alice') == 5
        assert tracker.selected_seat(film_id=film.id, user_id='bob') is None

    def test_mark_booked_on_unopened_film_is_ignored(
        self, tracker: SeatAvailabilityTracker, film: Film
    ) -> None:
        tracker.mark_booked(film_id=film.id, seat_number=3)

        assert not tracker.is_booked(film_id=film.id, seat_number=3)

    def test_seat_map_of_unopened_film_raises(
        self, tracker: SeatAvailabilityTracker, film: Film
    ) -> None:
        with pytest.raises(NotFoundError):
            tracker.booked_seats(film_id=film.id)
