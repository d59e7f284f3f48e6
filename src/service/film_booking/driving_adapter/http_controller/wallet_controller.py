from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app import notification
from src.service.film_booking.app.wallet_connectivity_monitor import WalletConnectivityMonitor
from src.service.film_booking.driving_adapter.http_controller.schema.notification_schema import (
    NotificationResponse,
)
from src.service.film_booking.driving_adapter.http_controller.schema.wallet_schema import (
    NetworkStatusResponse,
    WalletStateResponse,
)


router = APIRouter()


def _state_response(
    monitor: WalletConnectivityMonitor, notification_response: NotificationResponse | None = None
) -> WalletStateResponse:
    return WalletStateResponse.from_session(
        monitor.session, state=monitor.state(), notification=notification_response
    )


@router.get('')
@inject
async def get_wallet_state(
    monitor: WalletConnectivityMonitor = Depends(Provide[Container.wallet_monitor]),
) -> WalletStateResponse:
    return _state_response(monitor)


@router.post('/connect')
@Logger.io
@inject
async def connect_wallet(
    monitor: WalletConnectivityMonitor = Depends(Provide[Container.wallet_monitor]),
) -> WalletStateResponse:
    address = await monitor.connect()
    await monitor.check_network()
    return _state_response(
        monitor, NotificationResponse.from_notification(notification.wallet_connected(address))
    )


@router.post('/disconnect')
@Logger.io
@inject
async def disconnect_wallet(
    monitor: WalletConnectivityMonitor = Depends(Provide[Container.wallet_monitor]),
) -> WalletStateResponse:
    await monitor.disconnect()
    return _state_response(monitor)


@router.get('/network')
@Logger.io
@inject
async def check_network(
    monitor: WalletConnectivityMonitor = Depends(Provide[Container.wallet_monitor]),
) -> NetworkStatusResponse:
    return NetworkStatusResponse.from_value(await monitor.check_network())


@router.post('/network/switch')
@Logger.io
@inject
async def switch_network(
    monitor: WalletConnectivityMonitor = Depends(Provide[Container.wallet_monitor]),
) -> NetworkStatusResponse:
    return NetworkStatusResponse.from_value(await monitor.switch_network())
