from typing import List, Optional

import attrs


@attrs.frozen
class Film:
    """Catalog entry; owned by the backend and read-only here"""

    id: str
    name: str
    price: float
    seat_capacity: int
    description: str = ''
    duration: Optional[int] = None  # minutes
    release_date: Optional[str] = None
    genres: List[str] = attrs.field(factory=list)
    image: Optional[str] = None

    @property
    def seat_numbers(self) -> range:
        return range(1, self.seat_capacity + 1)

    def has_seat(self, seat_number: int) -> bool:
        return 1 <= seat_number <= self.seat_capacity

    def formatted_duration(self) -> str:
        if not self.duration:
            return ''
        hours, minutes = divmod(self.duration, 60)
        return f'{hours}h {minutes}m'
