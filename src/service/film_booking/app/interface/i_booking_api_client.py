"""
Booking API Client Interface

Backend REST API consumed by the booking engine. Implementations translate
transport failures and non-2xx answers into FetchError and never leak raw
HTTP client exceptions.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.film_booking.app.dto import CreateReservationRequest, FilmDetail, PaymentDetails
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.value_object.session_context import SessionContext


class IBookingApiClient(ABC):
    @abstractmethod
    async def list_films(self) -> List[Film]:
        """GET /film"""
        pass

    @abstractmethod
    async def get_film(self, *, film_id: str) -> FilmDetail:
        """
        GET /film/{id}

        Returns:
            Normalized film; booked_seats is None when the response embeds no reservations

        Raises:
            FetchError: backend unreachable or non-2xx
        """
        pass

    @abstractmethod
    async def get_booked_seats(self, *, film_id: str) -> List[int]:
        """GET /film/{id}/seats"""
        pass

    @abstractmethod
    async def create_reservation(
        self, *, session: SessionContext, request: CreateReservationRequest
    ) -> Reservation:
        """
        POST /reservations

        Raises:
            FetchError: upstream_status is set when the backend refused the hold
        """
        pass

    @abstractmethod
    async def submit_payment(
        self, *, session: SessionContext, reservation_id: str, payment: PaymentDetails
    ) -> Optional[Reservation]:
        """
        POST /reservation/payment/{reservationId}

        Returns:
            The updated reservation when the backend echoes it, otherwise None
        """
        pass

    @abstractmethod
    async def list_user_reservations(
        self, *, session: SessionContext, user_id: str
    ) -> List[Reservation]:
        """GET /reservations/{userId}"""
        pass

    @abstractmethod
    async def verify_reservation(self, *, film_id: str, user_id: str, seat_number: int) -> bool:
        """GET /reservations/verify/{filmId}/{userId}/{seatNumber}"""
        pass
