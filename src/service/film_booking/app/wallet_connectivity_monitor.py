"""
Wallet Connectivity Monitor

Tracks the injected wallet's connection and network state.

State machine:
    Disconnected --connect--> Connected/NetworkUnknown
    --check_network--> Connected/OnExpectedNetwork | Connected/WrongNetwork
    --switch_network--> Connected/OnExpectedNetwork
    disconnect (explicit or provider-initiated) --> Disconnected

Changes are detected through chain-change events when the provider emits
them and through a fixed-interval poll; both end in the same
WalletStateChanged broadcast.
"""

from typing import Callable, Optional

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream

from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.exception.exceptions import (
    NetworkSwitchError,
    WalletConnectionError,
    WalletRejected,
    WalletUnavailable,
)
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import WalletStateChanged
from src.service.film_booking.app.interface.i_wallet_provider import (
    IWalletProvider,
    ProviderRpcError,
)
from src.service.film_booking.domain.entity.wallet_session_entity import WalletSession
from src.service.film_booking.domain.enum.wallet_state import WalletState
from src.service.film_booking.domain.value_object.chain_descriptor import ChainDescriptor
from src.service.film_booking.domain.value_object.network_status import NetworkStatus


WALLET_STATE_TOPIC = 'wallet_state'


class WalletConnectivityMonitor:
    def __init__(
        self,
        *,
        provider: Optional[IWalletProvider],
        broadcaster: IInMemoryEventBroadcaster,
        expected_chain: ChainDescriptor,
        poll_interval_seconds: float = 2.0,
    ) -> None:
        self.provider = provider
        self.broadcaster = broadcaster
        self.expected_chain = expected_chain
        self.poll_interval_seconds = poll_interval_seconds
        self._session = WalletSession.disconnected()
        # Set by an explicit disconnect; polling must not reconnect on its own
        self._user_disconnected = False

    # ---- last-known state (synchronous) ----

    @property
    def session(self) -> WalletSession:
        return self._session

    def is_connected(self) -> bool:
        return self._session.connected

    def get_address(self) -> str:
        return self._session.address

    def state(self) -> WalletState:
        return self._session.state(expected_chain_id=self.expected_chain.chain_id)

    def snapshot(self) -> WalletStateChanged:
        return WalletStateChanged.from_session(
            self._session, expected_chain_id=self.expected_chain.chain_id
        )

    async def _update_session(self, session: WalletSession) -> None:
        if session == self._session:
            return
        previous_state = self.state()
        self._session = session
        Logger.base.info(
            f'[WALLET] {previous_state} -> {self.state()} '
            f'({session.short_address or "no account"}, chain={session.chain_id})'
        )
        await self.broadcaster.broadcast(
            topic=WALLET_STATE_TOPIC, event_data=self.snapshot().to_event_data()
        )

    def _require_provider(self) -> IWalletProvider:
        if self.provider is None:
            raise WalletUnavailable('No wallet provider found. Please install a wallet extension.')
        return self.provider

    # ---- operations ----

    @Logger.io
    async def connect(self) -> str:
        """
        Request account access from the wallet

        Returns:
            The connected account address

        Raises:
            WalletUnavailable: no provider present
            WalletRejected: the user declined in the wallet UI
            WalletConnectionError: any other connection failure
        """
        provider = self._require_provider()
        try:
            accounts = await provider.request_accounts()
        except ProviderRpcError as e:
            if e.is_user_rejection:
                raise WalletRejected('Wallet connection was rejected by the user') from e
            raise WalletConnectionError(f'Failed to connect wallet: {e.message}') from e

        if not accounts:
            raise WalletConnectionError('The wallet did not expose any account')

        self._user_disconnected = False
        await self._update_session(WalletSession.connected_to(accounts[0]))
        return accounts[0]

    @Logger.io
    async def disconnect(self) -> None:
        self._user_disconnected = True
        await self._update_session(WalletSession.disconnected())

    @Logger.io
    async def check_network(self) -> NetworkStatus:
        """
        Compare the wallet's chain with the expected chain

        Raises:
            WalletUnavailable: no provider present
            WalletConnectionError: the chain id could not be read
        """
        provider = self._require_provider()
        try:
            chain_id = await provider.get_chain_id()
        except ProviderRpcError as e:
            raise WalletConnectionError(f'Could not read the wallet network: {e.message}') from e

        if self._session.connected:
            await self._update_session(self._session.with_chain(chain_id))
        return NetworkStatus(
            on_expected_network=chain_id == self.expected_chain.chain_id,
            current_chain_id=chain_id,
            expected_chain_id=self.expected_chain.chain_id,
        )

    @Logger.io
    async def switch_network(self) -> NetworkStatus:
        """
        Ask the wallet to switch to the expected chain

        When the wallet does not know the chain (4902) it is registered with
        add_chain and the switch is attempted again.

        Raises:
            NetworkSwitchError: switch (or add-then-switch) failed
        """
        if self.provider is None:
            raise NetworkSwitchError('No wallet provider found. Please install a wallet extension.')

        target = self.expected_chain
        try:
            await self.provider.switch_chain(chain_id=target.chain_id)
        except ProviderRpcError as e:
            if e.code != ProviderRpcError.UNRECOGNIZED_CHAIN:
                raise NetworkSwitchError(
                    f'Failed to switch to the {target.chain_name} network: {e.message}'
                ) from e
            Logger.base.info(f'[WALLET] {target.chain_name} unknown to the wallet, adding it')
            try:
                await self.provider.add_chain(descriptor=target)
                await self.provider.switch_chain(chain_id=target.chain_id)
            except ProviderRpcError as add_error:
                raise NetworkSwitchError(
                    f'Failed to add the {target.chain_name} network: {add_error.message}'
                ) from add_error

        if self._session.connected:
            await self._update_session(self._session.with_chain(target.chain_id))
        return NetworkStatus(
            on_expected_network=True,
            current_chain_id=target.chain_id,
            expected_chain_id=target.chain_id,
        )

    # ---- observation ----

    async def poll_once(self) -> WalletState:
        """Re-read accounts and chain without prompting the user."""
        if self.provider is None:
            await self._update_session(WalletSession.disconnected())
            return self.state()

        try:
            accounts = await self.provider.get_accounts()
        except ProviderRpcError as e:
            Logger.base.warning(f'[WALLET] Polling accounts failed: {e.message}')
            return self.state()

        if not accounts:
            # Locked or disconnected from the wallet side
            await self._update_session(WalletSession.disconnected())
            return self.state()
        if self._user_disconnected:
            return self.state()

        chain_id = self._session.chain_id
        try:
            chain_id = await self.provider.get_chain_id()
        except ProviderRpcError as e:
            Logger.base.warning(f'[WALLET] Polling chain id failed: {e.message}')

        await self._update_session(WalletSession.connected_to(accounts[0]).with_chain(chain_id))
        return self.state()

    async def _on_chain_changed(self, chain_id: int) -> None:
        Logger.base.info(f'[WALLET] Chain changed event: {chain_id}')
        if self._session.connected:
            await self._update_session(self._session.with_chain(chain_id))

    async def run(self) -> None:
        """Watch loop: chain-change events where supported, plus polling at a fixed interval."""
        unsubscribe: Optional[Callable[[], None]] = None
        if self.provider is not None:
            unsubscribe = self.provider.on_chain_changed(self._on_chain_changed)
        Logger.base.info(
            f'[WALLET] Watching wallet state (events={"on" if unsubscribe else "off"}, '
            f'poll={self.poll_interval_seconds}s)'
        )
        try:
            while True:
                try:
                    await self.poll_once()
                except Exception as e:
                    # A failed poll must not end the watch loop
                    Logger.base.exception(f'[WALLET] Poll failed: {type(e).__name__}: {e}')
                await anyio.sleep(self.poll_interval_seconds)
        finally:
            if unsubscribe is not None:
                unsubscribe()

    async def subscribe(self) -> MemoryObjectReceiveStream[dict]:
        return await self.broadcaster.subscribe(topic=WALLET_STATE_TOPIC)

    async def unsubscribe(self, stream: MemoryObjectReceiveStream[dict]) -> None:
        await self.broadcaster.unsubscribe(topic=WALLET_STATE_TOPIC, stream=stream)
