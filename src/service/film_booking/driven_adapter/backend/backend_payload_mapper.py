"""
Boundary normalization of backend payloads into domain records

The film detail endpoint answers in two shapes; both are merged field by
field here (top-level value first, then filmDetail) so the ambiguity never
reaches the core.
"""

from typing import Any, List, Optional

from src.service.film_booking.app.dto import FilmDetail
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.driven_adapter.backend.backend_payload_schema import (
    FilmDetailPayload,
    FilmPayload,
    FilmRefPayload,
    ReservationPayload,
)


DEFAULT_FILM_DESCRIPTION = 'No description available for this film.'

_FILM_FIELDS = (
    'id',
    'name',
    'price',
    'seat_quantity',
    'img',
    'description',
    'duration',
    'release_date',
    'genres',
)


def _first(*values: Any) -> Any:
    return next((v for v in values if v), None)


def merge_film_shapes(payload: FilmDetailPayload) -> FilmPayload:
    nested = payload.film_detail or FilmPayload()
    return FilmPayload.model_validate(
        {field: _first(getattr(payload, field), getattr(nested, field)) for field in _FILM_FIELDS}
    )


def to_film(payload: FilmPayload) -> Film:
    if not payload.id:
        raise ValueError('Film payload has no id')
    return Film(
        id=payload.id,
        name=payload.name or '',
        price=payload.price or 0.0,
        seat_capacity=payload.seat_quantity or 0,
        description=payload.description or DEFAULT_FILM_DESCRIPTION,
        duration=payload.duration,
        release_date=payload.release_date,
        genres=list(payload.genres or []),
        image=payload.img,
    )


def to_film_detail(payload: FilmDetailPayload) -> FilmDetail:
    booked_seats: Optional[List[int]] = None
    if payload.reservations is not None:
        booked_seats = [r.seat_number for r in payload.reservations]
    return FilmDetail(film=to_film(merge_film_shapes(payload)), booked_seats=booked_seats)


def to_reservation(payload: ReservationPayload) -> Reservation:
    film_title: Optional[str] = None
    if isinstance(payload.film_id, FilmRefPayload):
        film_id = payload.film_id.id
        film_title = payload.film_id.name
    else:
        film_id = payload.film_id

    return Reservation(
        id=payload.id,
        film_id=film_id,
        user_id=payload.user_id,
        seat_number=payload.seat_number,
        created_at=payload.created_at,
        verified=payload.verified,
        expires_at=None if payload.verified else payload.expires_at,
        block_index=payload.block_index,
        transaction_hash=payload.transaction_hash,
        wallet_address=payload.wallet_address,
        film_title=film_title,
    )
