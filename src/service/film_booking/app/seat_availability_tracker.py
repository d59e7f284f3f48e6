"""
Seat Availability Tracker

Owns one SeatMap per opened film. The booked set is only mutated through
open/refresh (server data) and mark_booked (optimistic local bookings).
"""

from typing import Dict, FrozenSet, List, Optional

from opentelemetry import trace

from src.platform.exception.exceptions import FetchError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import FilmDetail
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.seat_map import SeatMap


class SeatAvailabilityTracker:
    def __init__(self, *, booking_api_client: IBookingApiClient) -> None:
        self.booking_api_client = booking_api_client
        self.tracer = trace.get_tracer(__name__)
        self._films: Dict[str, Film] = {}
        self._seat_maps: Dict[str, SeatMap] = {}

    @Logger.io
    async def load_booked_seats(
        self, *, film_id: str, detail: Optional[FilmDetail] = None
    ) -> FrozenSet[int]:
        """
        Booked seat numbers for a film

        Uses the reservations embedded in the detail response when present,
        otherwise GET /film/{id}/seats.

        Raises:
            FetchError: backend unreachable or non-2xx
        """
        if detail is not None and detail.booked_seats is not None:
            return frozenset(detail.booked_seats)
        return frozenset(await self.booking_api_client.get_booked_seats(film_id=film_id))

    async def _load_booked_seats_or_empty(
        self, *, film_id: str, detail: Optional[FilmDetail] = None
    ) -> FrozenSet[int]:
        try:
            return await self.load_booked_seats(film_id=film_id, detail=detail)
        except FetchError as e:
            Logger.base.warning(
                f'[SEATS] Booked seats unknown for film {film_id}, defaulting to none: {e.message}'
            )
            return frozenset()

    @Logger.io
    async def open(self, *, film_id: str) -> SeatMap:
        """
        Load a film and start a fresh seat map for it (full reload)

        Raises:
            FetchError: the film itself could not be loaded
        """
        with self.tracer.start_as_current_span(
            'seats.open', attributes={'film.id': film_id}
        ):
            detail = await self.booking_api_client.get_film(film_id=film_id)
            booked = await self._load_booked_seats_or_empty(film_id=film_id, detail=detail)

            self._films[film_id] = detail.film
            seat_map = SeatMap(
                film_id=film_id,
                seat_capacity=detail.film.seat_capacity,
                server_booked=booked,
            )
            self._seat_maps[film_id] = seat_map
            Logger.base.info(
                f'[SEATS] Opened film {film_id}: '
                f'capacity={seat_map.seat_capacity}, booked={len(seat_map.booked)}'
            )
            return seat_map

    @Logger.io
    async def refresh(self, *, film_id: str) -> SeatMap:
        """Re-fetch booked seats and reconcile them into the open seat map."""
        seat_map = self._seat_maps.get(film_id)
        if seat_map is None:
            return await self.open(film_id=film_id)

        booked = await self._load_booked_seats_or_empty(film_id=film_id)
        seat_map.reconcile(booked)
        Logger.base.debug(f'[SEATS] Refreshed film {film_id}: booked={sorted(seat_map.booked)}')
        return seat_map

    async def ensure_open(self, *, film_id: str) -> SeatMap:
        if (seat_map := self._seat_maps.get(film_id)) is not None:
            return seat_map
        return await self.open(film_id=film_id)

    def seat_map(self, *, film_id: str) -> SeatMap:
        if (seat_map := self._seat_maps.get(film_id)) is None:
            raise NotFoundError(f'Film {film_id} has not been opened')
        return seat_map

    def get_film(self, *, film_id: str) -> Film:
        if (film := self._films.get(film_id)) is None:
            raise NotFoundError(f'Film {film_id} has not been opened')
        return film

    def select(self, *, film_id: str, seat_number: int, user_id: str) -> Optional[int]:
        """
        Toggle the user's selection on an opened film

        Raises:
            InvalidSelection: seat booked or outside the film's capacity
        """
        return self.seat_map(film_id=film_id).select(seat_number, user_id=user_id)

    def selected_seat(self, *, film_id: str, user_id: str) -> Optional[int]:
        return self.seat_map(film_id=film_id).selected_by(user_id)

    def mark_booked(self, *, film_id: str, seat_number: int) -> None:
        seat_map = self._seat_maps.get(film_id)
        if seat_map is None:
            # Nothing displayed for this film yet; the next open() reads server state.
            Logger.base.debug(f'[SEATS] mark_booked on unopened film {film_id}, ignored')
            return
        seat_map.mark_booked(seat_number)
        Logger.base.info(f'[SEATS] Seat {seat_number} of film {film_id} marked booked')

    def is_booked(self, *, film_id: str, seat_number: int) -> bool:
        seat_map = self._seat_maps.get(film_id)
        return seat_map is not None and seat_map.is_booked(seat_number)

    def booked_seats(self, *, film_id: str) -> FrozenSet[int]:
        return self.seat_map(film_id=film_id).booked

    def selectable_seats(self, *, film_id: str) -> List[int]:
        return self.seat_map(film_id=film_id).selectable_seats()
