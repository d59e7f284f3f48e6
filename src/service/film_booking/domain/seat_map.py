"""
Seat Map Domain

Seat state for one film: which seats are booked and which one each user has
picked. No I/O; the tracker feeds it server data.

Effective booked set = server-reported bookings | optimistic local bookings.
Optimistic entries move into the server set once a refresh confirms them;
unconfirmed ones stay until the map is rebuilt, so the effective booked set
never shrinks within a session.

Selections are keyed by user id; two users may have the same free seat
selected, and neither sees the other's pick.
"""

from typing import Dict, FrozenSet, Iterable, Optional

from src.platform.exception.exceptions import InvalidSelection


class SeatMap:
    def __init__(
        self, *, film_id: str, seat_capacity: int, server_booked: Iterable[int] = ()
    ) -> None:
        if seat_capacity < 0:
            raise ValueError('seat_capacity must not be negative')
        self.film_id = film_id
        self.seat_capacity = seat_capacity
        self._server_booked: set[int] = set(server_booked)
        self._optimistic_booked: set[int] = set()
        self._selected: Dict[str, int] = {}

    def selected_by(self, user_id: str) -> Optional[int]:
        return self._selected.get(user_id)

    @property
    def server_booked(self) -> FrozenSet[int]:
        return frozenset(self._server_booked)

    @property
    def optimistic_booked(self) -> FrozenSet[int]:
        return frozenset(self._optimistic_booked)

    @property
    def booked(self) -> FrozenSet[int]:
        return frozenset(self._server_booked | self._optimistic_booked)

    def is_booked(self, seat_number: int) -> bool:
        return seat_number in self._server_booked or seat_number in self._optimistic_booked

    def in_range(self, seat_number: int) -> bool:
        return 1 <= seat_number <= self.seat_capacity

    def selectable_seats(self) -> list[int]:
        return [s for s in range(1, self.seat_capacity + 1) if not self.is_booked(s)]

    def select(self, seat_number: int, *, user_id: str) -> Optional[int]:
        """
        Toggle the user's selection; a new seat replaces their previous one.

        Raises:
            InvalidSelection: seat is booked or outside [1, capacity]; selection unchanged
        """
        if not self.in_range(seat_number):
            raise InvalidSelection(
                f'Seat {seat_number} does not exist (capacity {self.seat_capacity})'
            )
        if self.is_booked(seat_number):
            raise InvalidSelection(f'Seat {seat_number} is already booked')

        if self._selected.get(user_id) == seat_number:
            del self._selected[user_id]
        else:
            self._selected[user_id] = seat_number
        return self._selected.get(user_id)

    def clear_selection(self, user_id: str) -> None:
        self._selected.pop(user_id, None)

    def _drop_booked_selections(self) -> None:
        self._selected = {
            user_id: seat for user_id, seat in self._selected.items() if not self.is_booked(seat)
        }

    def mark_booked(self, seat_number: int) -> None:
        if not self.in_range(seat_number):
            raise InvalidSelection(
                f'Seat {seat_number} does not exist (capacity {self.seat_capacity})'
            )
        if seat_number not in self._server_booked:
            self._optimistic_booked.add(seat_number)
        self._drop_booked_selections()

    def reconcile(self, server_booked: Iterable[int]) -> None:
        """Apply an authoritative refresh from the backend."""
        self._server_booked |= set(server_booked)
        self._optimistic_booked -= self._server_booked
        self._drop_booked_selections()
