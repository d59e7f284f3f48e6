"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.film_booking.driving_adapter.http_controller import (
    dependencies,
    film_controller,
    reservation_controller,
    wallet_controller,
)


WIRE_MODULES: list[ModuleType] = [
    dependencies,
    film_controller,
    reservation_controller,
    wallet_controller,
]
