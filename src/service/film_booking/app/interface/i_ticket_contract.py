"""
Ticket Contract Interface

Builds call data for the ticket contract and decodes its return values.
"""

from abc import ABC, abstractmethod

from src.service.film_booking.domain.value_object.transaction import TransactionRequest


class ITicketContract(ABC):
    @property
    @abstractmethod
    def address(self) -> str:
        pass

    @property
    def is_configured(self) -> bool:
        return bool(self.address)

    @abstractmethod
    def build_mint_ticket_call(
        self, *, from_address: str, film_id: str, seat_number: int, metadata_uri: str
    ) -> TransactionRequest:
        """mintTicket(string filmId, uint256 seatNumber, string metadataURI)"""
        pass

    @abstractmethod
    def build_verify_ticket_call(
        self, *, film_id: str, user_id: str, seat_number: int
    ) -> TransactionRequest:
        """verifyTicket(string filmId, string userId, uint256 seatNumber) -> bool"""
        pass

    @abstractmethod
    def build_get_ticket_by_film_and_seat_call(
        self, *, film_id: str, seat_number: int
    ) -> TransactionRequest:
        """getTicketByFilmAndSeat(string filmId, uint256 seatNumber) -> uint256"""
        pass

    @abstractmethod
    def build_is_ticket_valid_call(self, *, ticket_id: int) -> TransactionRequest:
        """isTicketValid(uint256 ticketId) -> bool"""
        pass

    @abstractmethod
    def decode_bool(self, raw: str) -> bool:
        pass

    @abstractmethod
    def decode_uint(self, raw: str) -> int:
        pass
