"""
Wallet Provider Interface

Capability-level view of an injected wallet / signer (EIP-1193 style).
Implementations raise ProviderRpcError for every failure; the components
that call them translate it into the booking error taxonomy.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional

from src.service.film_booking.domain.value_object.chain_descriptor import ChainDescriptor
from src.service.film_booking.domain.value_object.transaction import (
    TransactionReceipt,
    TransactionRequest,
)


ChainChangedListener = Callable[[int], Awaitable[None]]


class ProviderRpcError(Exception):
    USER_REJECTED_REQUEST = 4001
    UNAUTHORIZED = 4100
    DISCONNECTED = 4900
    UNRECOGNIZED_CHAIN = 4902
    INTERNAL_ERROR = -32603
    TRANSACTION_REVERTED = -32000

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f'[{code}] {message}')

    @property
    def is_user_rejection(self) -> bool:
        return self.code == self.USER_REJECTED_REQUEST


class IWalletProvider(ABC):
    @abstractmethod
    async def request_accounts(self) -> List[str]:
        """Ask the user for account access (may prompt)."""
        pass

    @abstractmethod
    async def get_accounts(self) -> List[str]:
        """Accounts already exposed to us; never prompts. Empty when locked/disconnected."""
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        pass

    @abstractmethod
    async def switch_chain(self, *, chain_id: int) -> None:
        """Raises ProviderRpcError(UNRECOGNIZED_CHAIN) when the wallet does not know the chain."""
        pass

    @abstractmethod
    async def add_chain(self, *, descriptor: ChainDescriptor) -> None:
        pass

    @abstractmethod
    async def estimate_gas(self, *, tx: TransactionRequest) -> int:
        pass

    @abstractmethod
    async def send_transaction(self, *, tx: TransactionRequest) -> str:
        """Returns the transaction hash."""
        pass

    @abstractmethod
    async def wait_for_confirmation(self, *, tx_hash: str) -> TransactionReceipt:
        pass

    @abstractmethod
    async def call(self, *, tx: TransactionRequest) -> str:
        """Read-only contract call; returns the raw 0x-prefixed result."""
        pass

    @abstractmethod
    def on_chain_changed(self, listener: ChainChangedListener) -> Optional[Callable[[], None]]:
        """
        Register a chain-change listener

        Returns:
            An unsubscribe callable, or None when the provider emits no events
        """
        pass
