import pytest

from src.service.film_booking.domain.entity.wallet_session_entity import (
    WalletSession,
    shorten_address,
)
from src.service.film_booking.domain.enum.wallet_state import WalletState


ADDRESS = '0x' + 'ab' * 20
EXPECTED_CHAIN_ID = 11155111


class TestWalletSession:
    def test_disconnected_session_has_no_address(self) -> None:
        session = WalletSession.disconnected()

        assert not session.connected
        assert session.address == ''
        assert session.state(expected_chain_id=EXPECTED_CHAIN_ID) is WalletState.DISCONNECTED

    def test_connected_session_without_chain_is_network_unknown(self) -> None:
        session = WalletSession.connected_to(ADDRESS)

        assert session.state(expected_chain_id=EXPECTED_CHAIN_ID) is WalletState.NETWORK_UNKNOWN

    @pytest.mark.parametrize(
        'chain_id, expected_state',
        [
            (EXPECTED_CHAIN_ID, WalletState.ON_EXPECTED_NETWORK),
            (1, WalletState.WRONG_NETWORK),
        ],
    )
    def test_state_follows_chain(self, chain_id: int, expected_state: WalletState) -> None:
        session = WalletSession.connected_to(ADDRESS).with_chain(chain_id)

        assert session.state(expected_chain_id=EXPECTED_CHAIN_ID) is expected_state

    def test_connected_session_requires_address(self) -> None:
        with pytest.raises(ValueError):
            WalletSession(connected=True, address='')

    def test_disconnected_session_cannot_carry_address(self) -> None:
        with pytest.raises(ValueError):
            WalletSession(connected=False, address=ADDRESS)

    def test_short_address(self) -> None:
        session = WalletSession.connected_to(ADDRESS)

        assert session.short_address == '0xabab...abab'

    def test_short_address_leaves_short_values_alone(self) -> None:
        assert shorten_address('0x1234') == '0x1234'
