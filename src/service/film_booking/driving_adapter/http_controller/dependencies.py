"""FastAPI providers for the per-request (session-bound) components"""

from typing import Callable

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.service.film_booking.app.payment_orchestrator import PaymentOrchestrator
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.driving_adapter.http_controller.auth.session_auth import (
    get_session_context,
)


@inject
def get_reservation_hold_manager(
    session: SessionContext = Depends(get_session_context),
    hold_manager_factory: Callable[..., ReservationHoldManager] = Depends(
        Provide[Container.reservation_hold_manager.provider]
    ),
) -> ReservationHoldManager:
    return hold_manager_factory(session=session)


@inject
def get_payment_orchestrator(
    session: SessionContext = Depends(get_session_context),
    hold_manager: ReservationHoldManager = Depends(get_reservation_hold_manager),
    orchestrator_factory: Callable[..., PaymentOrchestrator] = Depends(
        Provide[Container.payment_orchestrator.provider]
    ),
) -> PaymentOrchestrator:
    return orchestrator_factory(session=session, hold_manager=hold_manager)
