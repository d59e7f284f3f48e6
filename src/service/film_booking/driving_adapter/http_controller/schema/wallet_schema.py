from typing import Optional

from pydantic import BaseModel

from src.service.film_booking.domain.entity.wallet_session_entity import WalletSession
from src.service.film_booking.domain.enum.wallet_state import WalletState
from src.service.film_booking.domain.value_object.network_status import NetworkStatus
from src.service.film_booking.driving_adapter.http_controller.schema.notification_schema import (
    NotificationResponse,
)


class WalletStateResponse(BaseModel):
    connected: bool
    address: str
    short_address: str
    chain_id: Optional[int] = None
    state: WalletState
    notification: Optional[NotificationResponse] = None

    @classmethod
    def from_session(
        cls,
        session: WalletSession,
        *,
        state: WalletState,
        notification: Optional[NotificationResponse] = None,
    ) -> 'WalletStateResponse':
        return cls(
            connected=session.connected,
            address=session.address,
            short_address=session.short_address,
            chain_id=session.chain_id,
            state=state,
            notification=notification,
        )


class NetworkStatusResponse(BaseModel):
    on_expected_network: bool
    current_chain_id: Optional[int] = None
    expected_chain_id: int

    @classmethod
    def from_value(cls, status: NetworkStatus) -> 'NetworkStatusResponse':
        return cls(
            on_expected_network=status.on_expected_network,
            current_chain_id=status.current_chain_id,
            expected_chain_id=status.expected_chain_id,
        )
