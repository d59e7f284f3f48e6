"""Pydantic models for the backend REST payloads (camelCase, Mongo-style _id)"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _BackendPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class FilmPayload(_BackendPayload):
    id: Optional[str] = Field(default=None, alias='_id')
    name: Optional[str] = None
    price: Optional[float] = None
    seat_quantity: Optional[int] = Field(default=None, alias='seatQuantity')
    img: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    release_date: Optional[str] = Field(default=None, alias='releaseDate')
    genres: Optional[List[str]] = None


class EmbeddedReservationPayload(_BackendPayload):
    seat_number: int = Field(alias='seatNumber')


class FilmDetailPayload(FilmPayload):
    """GET /film/{id}: the film itself, or {filmDetail: {...}, reservations: [...]}"""

    film_detail: Optional[FilmPayload] = Field(default=None, alias='filmDetail')
    reservations: Optional[List[EmbeddedReservationPayload]] = None


class BookedSeatsPayload(_BackendPayload):
    booked_seats: List[int] = Field(default_factory=list, alias='bookedSeats')


class FilmRefPayload(_BackendPayload):
    id: str = Field(alias='_id')
    name: Optional[str] = None
    img: Optional[str] = None


class ReservationPayload(_BackendPayload):
    id: str = Field(alias='_id')
    user_id: str = Field(alias='userId')
    film_id: Union[str, FilmRefPayload] = Field(alias='filmId')
    seat_number: int = Field(alias='seatNumber')
    verified: bool = False
    created_at: datetime = Field(alias='createdAt')
    expires_at: Optional[datetime] = Field(default=None, alias='expiresAt')
    block_index: Optional[int] = Field(default=None, alias='blockIndex')
    transaction_hash: Optional[str] = Field(default=None, alias='transactionHash')
    wallet_address: Optional[str] = Field(default=None, alias='walletAddress')


class VerifyReservationPayload(_BackendPayload):
    verified: bool = False
