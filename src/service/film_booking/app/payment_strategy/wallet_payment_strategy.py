"""
Wallet payment strategy

Strictly sequential: connect -> network check -> mint on chain -> confirm
with the backend. A step never starts unless the previous one succeeded,
and at most one transaction is submitted per invocation.

Any failure after the transaction hash is known is a ReconciliationError:
the user has paid (or may still be charged once it is mined) and must not
be asked to pay again.
"""

import base64
import time
from typing import Callable, Iterable, Optional

import orjson

from src.platform.exception.exceptions import (
    BlockchainTransactionError,
    FetchError,
    ReconciliationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import CreateReservationRequest, PaymentDetails, PaymentResult
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.app.interface.i_payment_strategy import (
    IPaymentStrategy,
    StageReporter,
)
from src.service.film_booking.app.interface.i_ticket_contract import ITicketContract
from src.service.film_booking.app.interface.i_wallet_provider import (
    IWalletProvider,
    ProviderRpcError,
)
from src.service.film_booking.app.wallet_connectivity_monitor import WalletConnectivityMonitor
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.payment_stage import PaymentStage
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.domain.value_object.transaction import TransactionRequest


METADATA_URI_PREFIX = 'data:application/json;base64,'

BACKEND_CONFIRMATION_FAILED = (
    'Payment succeeded on-chain but confirmation failed. Please contact support.'
)
CONFIRMATION_UNKNOWN = (
    'Transaction was sent but its confirmation could not be read. '
    'Do not pay again; please contact support.'
)


def build_ticket_metadata_uri(*, film: Film, seat_number: int, timestamp_ms: int) -> str:
    metadata = orjson.dumps(
        {
            'filmId': film.id,
            'seatNumber': seat_number,
            'price': film.price,
            'timestamp': timestamp_ms,
        }
    )
    return METADATA_URI_PREFIX + base64.b64encode(metadata).decode('ascii')


class WalletPaymentStrategy(IPaymentStrategy):
    method = PaymentMethod.BLOCKCHAIN

    def __init__(
        self,
        *,
        booking_api_client: IBookingApiClient,
        wallet_monitor: WalletConnectivityMonitor,
        ticket_contract: ITicketContract,
        gas_limit_multiplier: float = 1.2,
        fallback_gas_limit: int = 500_000,
        fallback_gas_chain_ids: Iterable[int] = (),
        clock_ms: Callable[[], int] = lambda: int(time.time() * 1000),
    ) -> None:
        self.booking_api_client = booking_api_client
        self.wallet_monitor = wallet_monitor
        self.ticket_contract = ticket_contract
        self.gas_limit_multiplier = gas_limit_multiplier
        self.fallback_gas_limit = fallback_gas_limit
        self.fallback_gas_chain_ids = frozenset(fallback_gas_chain_ids)
        self.clock_ms = clock_ms

    @property
    def provider(self) -> Optional[IWalletProvider]:
        return self.wallet_monitor.provider

    @Logger.io
    async def complete_payment(
        self,
        *,
        session: SessionContext,
        reservation: Reservation,
        film: Film,
        report_stage: StageReporter,
    ) -> PaymentResult:
        proof = await self.pay_on_chain(
            film=film,
            seat_number=reservation.seat_number,
            report_stage=report_stage,
            reservation_id=reservation.id,
        )

        report_stage(PaymentStage.CONFIRMING_WITH_BACKEND)
        try:
            confirmed = await self.booking_api_client.submit_payment(
                session=session,
                reservation_id=reservation.id,
                payment=PaymentDetails(payment_method=self.method, amount=film.price, proof=proof),
            )
        except FetchError as e:
            raise self._reconciliation_error(
                message=BACKEND_CONFIRMATION_FAILED,
                cause=e.message,
                proof=proof,
                reservation_id=reservation.id,
                film_id=film.id,
                seat_number=reservation.seat_number,
            ) from e

        verified = (
            confirmed if confirmed and confirmed.verified else reservation.mark_as_verified(proof)
        )
        return PaymentResult(
            reservation=verified, method=self.method, amount=film.price, proof=proof
        )

    @Logger.io
    async def purchase_seat(
        self,
        *,
        session: SessionContext,
        film: Film,
        seat_number: int,
        report_stage: StageReporter,
    ) -> PaymentResult:
        """
        Buy a seat that has no hold yet

        The reservation is written after the transaction, already verified,
        via POST /reservations with blockchainVerified=true.
        """
        proof = await self.pay_on_chain(film=film, seat_number=seat_number, report_stage=report_stage)

        report_stage(PaymentStage.CONFIRMING_WITH_BACKEND)
        try:
            reservation = await self.booking_api_client.create_reservation(
                session=session,
                request=CreateReservationRequest(
                    user_id=session.user_id,
                    film_id=film.id,
                    seat_number=seat_number,
                    blockchain_verified=True,
                    proof=proof,
                ),
            )
        except FetchError as e:
            raise self._reconciliation_error(
                message=BACKEND_CONFIRMATION_FAILED,
                cause=e.message,
                proof=proof,
                reservation_id=None,
                film_id=film.id,
                seat_number=seat_number,
            ) from e

        if not reservation.verified:
            reservation = reservation.mark_as_verified(proof)
        return PaymentResult(
            reservation=reservation, method=self.method, amount=film.price, proof=proof
        )

    async def pay_on_chain(
        self,
        *,
        film: Film,
        seat_number: int,
        report_stage: StageReporter,
        reservation_id: Optional[str] = None,
    ) -> PaymentProof:
        """
        Connect, gate on the network and mint the ticket

        Raises:
            WalletConnectionError: connection failed or was rejected
            NetworkSwitchError: wallet on the wrong chain and the switch failed
            BlockchainTransactionError: rejected, gas failure, reverted, or no contract configured
            ReconciliationError: the transaction was sent but its receipt could not be read
        """
        report_stage(PaymentStage.CONNECTING_WALLET)
        if not self.wallet_monitor.is_connected():
            await self.wallet_monitor.connect()

        network = await self.wallet_monitor.check_network()
        if not network.on_expected_network:
            await self.wallet_monitor.switch_network()

        provider = self.provider
        if provider is None or not self.ticket_contract.is_configured:
            raise BlockchainTransactionError('Ticket contract is not configured')

        report_stage(PaymentStage.CONFIRMING_ON_CHAIN)
        address = self.wallet_monitor.get_address()
        tx = self.ticket_contract.build_mint_ticket_call(
            from_address=address,
            film_id=film.id,
            seat_number=seat_number,
            metadata_uri=build_ticket_metadata_uri(
                film=film, seat_number=seat_number, timestamp_ms=self.clock_ms()
            ),
        )
        try:
            tx = tx.with_gas(await self._gas_limit(provider, tx))
            tx_hash = await provider.send_transaction(tx=tx)
        except ProviderRpcError as e:
            if e.is_user_rejection:
                raise BlockchainTransactionError('Transaction was rejected in the wallet') from e
            raise BlockchainTransactionError(f'Transaction failed: {e.message}') from e

        Logger.base.info(f'[PAYMENT] Transaction sent: {tx_hash}')
        try:
            receipt = await provider.wait_for_confirmation(tx_hash=tx_hash)
        except ProviderRpcError as e:
            # Sent but unobserved: it may still be mined, so paying again is not safe
            raise self._reconciliation_error(
                message=CONFIRMATION_UNKNOWN,
                cause=e.message,
                proof=PaymentProof(
                    wallet_address=address, transaction_hash=tx_hash, block_index=None
                ),
                reservation_id=reservation_id,
                film_id=film.id,
                seat_number=seat_number,
            ) from e

        if not receipt.succeeded:
            raise BlockchainTransactionError(f'Transaction {receipt.transaction_hash} reverted')

        Logger.base.info(
            f'[PAYMENT] Transaction {receipt.transaction_hash} confirmed in block {receipt.block_number}'
        )
        return PaymentProof(
            wallet_address=address,
            transaction_hash=receipt.transaction_hash,
            block_index=receipt.block_number,
        )

    async def _gas_limit(self, provider: IWalletProvider, tx: TransactionRequest) -> int:
        try:
            estimate = await provider.estimate_gas(tx=tx)
        except ProviderRpcError as e:
            chain_id = self.wallet_monitor.session.chain_id
            if chain_id not in self.fallback_gas_chain_ids:
                raise BlockchainTransactionError(f'Gas estimation failed: {e.message}') from e
            Logger.base.warning(
                f'[PAYMENT] Gas estimation failed on chain {chain_id}, '
                f'using fixed limit {self.fallback_gas_limit}: {e.message}'
            )
            return self.fallback_gas_limit
        return int(estimate * self.gas_limit_multiplier)

    @staticmethod
    def _reconciliation_error(
        *,
        message: str,
        cause: str,
        proof: PaymentProof,
        reservation_id: Optional[str],
        film_id: str,
        seat_number: int,
    ) -> ReconciliationError:
        Logger.base.critical(
            f'[PAYMENT] RECONCILIATION REQUIRED: {message} '
            f'(reservation={reservation_id}, film={film_id}, seat={seat_number}, '
            f'wallet={proof.wallet_address}, tx={proof.transaction_hash}, '
            f'block={proof.block_index}): {cause}'
        )
        return ReconciliationError(
            message,
            proof=proof,
            reservation_id=reservation_id,
            film_id=film_id,
            seat_number=seat_number,
        )
