from typing import Optional

import attrs

from src.service.film_booking.domain.entity.wallet_session_entity import WalletSession
from src.service.film_booking.domain.enum.wallet_state import WalletState


@attrs.define
class WalletStateChanged:
    """Published on every wallet state change, whether an event or a poll detected it"""

    connected: bool
    address: str
    chain_id: Optional[int]
    state: WalletState

    @classmethod
    def from_session(cls, session: WalletSession, *, expected_chain_id: int) -> 'WalletStateChanged':
        return cls(
            connected=session.connected,
            address=session.address,
            chain_id=session.chain_id,
            state=session.state(expected_chain_id=expected_chain_id),
        )

    def to_event_data(self) -> dict:
        return {
            'event_type': 'wallet_state_changed',
            'connected': self.connected,
            'address': self.address,
            'chain_id': self.chain_id,
            'state': self.state.value,
        }
