from typing import Dict, List, Optional

from src.service.film_booking.domain.entity.reservation_entity import Reservation


class ReservationBook:
    """Last-known local state of the reservations this process created, paid or listed"""

    def __init__(self) -> None:
        self._reservations: Dict[str, Reservation] = {}

    def record(self, reservation: Reservation) -> Reservation:
        self._reservations[reservation.id] = reservation
        return reservation

    def get(self, reservation_id: str) -> Optional[Reservation]:
        return self._reservations.get(reservation_id)

    def for_user(self, user_id: str) -> List[Reservation]:
        return [r for r in self._reservations.values() if r.user_id == user_id]

    def __len__(self) -> int:
        return len(self._reservations)
