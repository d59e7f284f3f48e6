"""
JSON-RPC Wallet Provider

Talks to a signer exposing the EIP-1193 method names over JSON-RPC/HTTP
(a local node, a wallet bridge, or a dev chain). HTTP has no push channel,
so chain-change events are emitted locally after a successful switch.
"""

import itertools
from typing import Any, Callable, List, Optional

import anyio
import httpx
import orjson

from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.interface.i_wallet_provider import (
    ChainChangedListener,
    IWalletProvider,
    ProviderRpcError,
)
from src.service.film_booking.domain.value_object.chain_descriptor import ChainDescriptor
from src.service.film_booking.domain.value_object.transaction import (
    TransactionReceipt,
    TransactionRequest,
)


RECEIPT_STATUS_FAILED = 0

# Node hiccups while a transaction is pending; the receipt is polled again
TRANSIENT_RPC_CODES = frozenset({ProviderRpcError.DISCONNECTED, ProviderRpcError.INTERNAL_ERROR})


def hex_to_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise ProviderRpcError(ProviderRpcError.INTERNAL_ERROR, f'Expected a hex quantity, got {value!r}')
    try:
        return int(value, 16)
    except ValueError as e:
        raise ProviderRpcError(
            ProviderRpcError.INTERNAL_ERROR, f'Malformed hex quantity {value!r}'
        ) from e


class JsonRpcWalletProviderImpl(IWalletProvider):
    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        confirmation_poll_seconds: float = 1.0,
        max_transient_errors: int = 30,
    ) -> None:
        self.http_client = http_client
        self.confirmation_poll_seconds = confirmation_poll_seconds
        self.max_transient_errors = max_transient_errors
        self._request_ids = itertools.count(1)
        self._chain_listeners: List[ChainChangedListener] = []

    async def _rpc(self, method: str, params: Optional[list] = None) -> Any:
        body = {
            'jsonrpc': '2.0',
            'id': next(self._request_ids),
            'method': method,
            'params': params or [],
        }
        try:
            response = await self.http_client.post(
                '', content=orjson.dumps(body), headers={'Content-Type': 'application/json'}
            )
        except httpx.HTTPError as e:
            raise ProviderRpcError(ProviderRpcError.DISCONNECTED, f'Wallet unreachable: {e}') from e

        if response.is_error:
            raise ProviderRpcError(
                ProviderRpcError.DISCONNECTED,
                f'Wallet answered {response.status_code} {response.reason_phrase}',
            )
        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ProviderRpcError(ProviderRpcError.INTERNAL_ERROR, 'Invalid JSON-RPC response') from e

        if not isinstance(data, dict):
            raise ProviderRpcError(
                ProviderRpcError.INTERNAL_ERROR, f'Invalid JSON-RPC response for {method}'
            )
        if error := data.get('error'):
            if not isinstance(error, dict):
                raise ProviderRpcError(ProviderRpcError.INTERNAL_ERROR, str(error))
            code = error.get('code', ProviderRpcError.INTERNAL_ERROR)
            raise ProviderRpcError(
                code if isinstance(code, int) else ProviderRpcError.INTERNAL_ERROR,
                str(error.get('message', 'Unknown wallet error')),
            )
        return data.get('result')

    async def request_accounts(self) -> List[str]:
        return list(await self._rpc('eth_requestAccounts') or [])

    async def get_accounts(self) -> List[str]:
        return list(await self._rpc('eth_accounts') or [])

    async def get_chain_id(self) -> int:
        return hex_to_int(await self._rpc('eth_chainId'))

    @Logger.io
    async def switch_chain(self, *, chain_id: int) -> None:
        await self._rpc('wallet_switchEthereumChain', [{'chainId': hex(chain_id)}])
        for listener in list(self._chain_listeners):
            await listener(chain_id)

    @Logger.io
    async def add_chain(self, *, descriptor: ChainDescriptor) -> None:
        await self._rpc('wallet_addEthereumChain', [descriptor.to_rpc_params()])

    async def estimate_gas(self, *, tx: TransactionRequest) -> int:
        return hex_to_int(await self._rpc('eth_estimateGas', [tx.to_rpc_params()]))

    @Logger.io
    async def send_transaction(self, *, tx: TransactionRequest) -> str:
        tx_hash = await self._rpc('eth_sendTransaction', [tx.to_rpc_params()])
        if not tx_hash:
            raise ProviderRpcError(ProviderRpcError.INTERNAL_ERROR, 'Wallet returned no transaction hash')
        return str(tx_hash)

    async def wait_for_confirmation(self, *, tx_hash: str) -> TransactionReceipt:
        """
        Poll eth_getTransactionReceipt until the transaction is mined

        Transient RPC errors (node unreachable, internal error) are logged and
        polled through, up to max_transient_errors in a row.
        """
        transient_errors = 0
        while True:
            try:
                receipt = await self._rpc('eth_getTransactionReceipt', [tx_hash])
            except ProviderRpcError as e:
                if e.code not in TRANSIENT_RPC_CODES:
                    raise
                transient_errors += 1
                if transient_errors > self.max_transient_errors:
                    raise
                Logger.base.warning(
                    f'[WALLET] Receipt poll for {tx_hash} failed '
                    f'({transient_errors}/{self.max_transient_errors}): {e}'
                )
            else:
                if receipt is not None:
                    break
                transient_errors = 0
            await anyio.sleep(self.confirmation_poll_seconds)

        if not isinstance(receipt, dict):
            raise ProviderRpcError(
                ProviderRpcError.INTERNAL_ERROR, f'Malformed receipt for {tx_hash}: {receipt!r}'
            )
        status = receipt.get('status')
        return TransactionReceipt(
            transaction_hash=receipt.get('transactionHash') or tx_hash,
            block_number=hex_to_int(receipt.get('blockNumber')),
            succeeded=status is None or hex_to_int(status) != RECEIPT_STATUS_FAILED,
        )

    async def call(self, *, tx: TransactionRequest) -> str:
        return str(await self._rpc('eth_call', [tx.to_rpc_params(), 'latest']))

    def on_chain_changed(self, listener: ChainChangedListener) -> Optional[Callable[[], None]]:
        self._chain_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._chain_listeners:
                self._chain_listeners.remove(listener)

        return unsubscribe
