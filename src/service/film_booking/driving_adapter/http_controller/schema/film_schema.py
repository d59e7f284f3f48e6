from typing import List, Optional

from pydantic import BaseModel

from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.seat_map import SeatMap


class FilmResponse(BaseModel):
    id: str
    name: str
    price: float
    seat_capacity: int
    description: str
    duration: Optional[int] = None
    formatted_duration: str = ''
    release_date: Optional[str] = None
    genres: List[str] = []
    image: Optional[str] = None

    @classmethod
    def from_entity(cls, film: Film) -> 'FilmResponse':
        return cls(
            id=film.id,
            name=film.name,
            price=film.price,
            seat_capacity=film.seat_capacity,
            description=film.description,
            duration=film.duration,
            formatted_duration=film.formatted_duration(),
            release_date=film.release_date,
            genres=list(film.genres),
            image=film.image,
        )


class SeatMapResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'film_id': '65f1c0ffee',
                'seat_capacity': 10,
                'booked_seats': [3, 7],
                'selected': 5,
                'selectable_seats': [1, 2, 4, 5, 6, 8, 9, 10],
                'available_count': 8,
            }
        },
    }

    film_id: str
    seat_capacity: int
    booked_seats: List[int]
    selected: Optional[int] = None
    selectable_seats: List[int]
    available_count: int

    @classmethod
    def from_seat_map(
        cls, seat_map: SeatMap, *, user_id: Optional[str] = None
    ) -> 'SeatMapResponse':
        """selected is the calling user's own pick; anonymous callers see none."""
        selectable = seat_map.selectable_seats()
        return cls(
            film_id=seat_map.film_id,
            seat_capacity=seat_map.seat_capacity,
            booked_seats=sorted(seat_map.booked),
            selected=seat_map.selected_by(user_id) if user_id else None,
            selectable_seats=selectable,
            available_count=len(selectable),
        )
