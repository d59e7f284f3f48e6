from typing import List, Optional

import attrs

from src.service.film_booking.domain.entity.film_entity import Film


@attrs.define
class FilmDetail:
    """Film plus the booked seats embedded in the detail response, when it has them"""

    film: Film
    booked_seats: Optional[List[int]] = None
