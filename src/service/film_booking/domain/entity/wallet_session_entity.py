from typing import Optional

import attrs

from src.service.film_booking.domain.enum.wallet_state import WalletState


@attrs.frozen
class WalletSession:
    """
    Ephemeral wallet connection state

    Invariant: address is a non-empty account identifier only while connected.
    """

    connected: bool = False
    address: str = ''
    chain_id: Optional[int] = None

    def __attrs_post_init__(self) -> None:
        if self.connected and not self.address:
            raise ValueError('A connected wallet session requires an address')
        if not self.connected and self.address:
            raise ValueError('A disconnected wallet session cannot carry an address')

    @classmethod
    def disconnected(cls) -> 'WalletSession':
        return cls()

    @classmethod
    def connected_to(cls, address: str) -> 'WalletSession':
        return cls(connected=True, address=address, chain_id=None)

    def with_chain(self, chain_id: Optional[int]) -> 'WalletSession':
        return attrs.evolve(self, chain_id=chain_id)

    def state(self, *, expected_chain_id: int) -> WalletState:
        if not self.connected:
            return WalletState.DISCONNECTED
        if self.chain_id is None:
            return WalletState.NETWORK_UNKNOWN
        if self.chain_id == expected_chain_id:
            return WalletState.ON_EXPECTED_NETWORK
        return WalletState.WRONG_NETWORK

    @property
    def short_address(self) -> str:
        if not self.address:
            return ''
        return shorten_address(self.address)


def shorten_address(address: str) -> str:
    if len(address) <= 10:
        return address
    return f'{address[:6]}...{address[-4:]}'
