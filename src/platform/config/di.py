"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from datetime import timedelta
from typing import Optional

from dependency_injector import containers, providers
import httpx

from src.platform.config.core_setting import Settings
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.film_booking.app.payment_in_flight_registry import PaymentInFlightRegistry
from src.service.film_booking.app.payment_orchestrator import PaymentOrchestrator
from src.service.film_booking.app.payment_strategy import (
    ConventionalPaymentStrategy,
    WalletPaymentStrategy,
)
from src.service.film_booking.app.reservation_book import ReservationBook
from src.service.film_booking.app.reservation_hold_manager import ReservationHoldManager
from src.service.film_booking.app.seat_availability_tracker import SeatAvailabilityTracker
from src.service.film_booking.app.ticket_verifier import TicketVerifier
from src.service.film_booking.app.wallet_connectivity_monitor import WalletConnectivityMonitor
from src.service.film_booking.domain.value_object.chain_descriptor import ChainDescriptor
from src.service.film_booking.driven_adapter.backend.booking_api_client_impl import (
    BookingApiClientImpl,
)
from src.service.film_booking.driven_adapter.wallet.json_rpc_wallet_provider_impl import (
    JsonRpcWalletProviderImpl,
)
from src.service.film_booking.driven_adapter.wallet.ticket_contract_impl import TicketContractImpl


def build_expected_chain(settings: Settings) -> ChainDescriptor:
    return ChainDescriptor(
        chain_id=settings.EXPECTED_CHAIN_ID,
        chain_name=settings.NETWORK_NAME,
        rpc_urls=(settings.NETWORK_RPC_URL,),
        block_explorer_urls=(settings.NETWORK_EXPLORER_URL,),
        currency_name=settings.NATIVE_CURRENCY_NAME,
        currency_symbol=settings.NATIVE_CURRENCY_SYMBOL,
        currency_decimals=settings.NATIVE_CURRENCY_DECIMALS,
    )


def build_wallet_provider(
    settings: Settings, http_client: httpx.AsyncClient
) -> Optional[JsonRpcWalletProviderImpl]:
    # No RPC endpoint configured == no wallet installed
    if not settings.WALLET_RPC_URL:
        return None
    return JsonRpcWalletProviderImpl(
        http_client=http_client,
        confirmation_poll_seconds=settings.TX_CONFIRMATION_POLL_SECONDS,
    )


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # HTTP clients (closed by the app lifespan)
    backend_http_client = providers.Singleton(
        httpx.AsyncClient, base_url=config_service.provided.BACKEND_API_URL
    )
    wallet_http_client = providers.Singleton(
        httpx.AsyncClient, base_url=config_service.provided.WALLET_RPC_URL
    )

    # Driven adapters
    booking_api_client = providers.Singleton(BookingApiClientImpl, http_client=backend_http_client)
    wallet_provider = providers.Singleton(
        build_wallet_provider, settings=config_service, http_client=wallet_http_client
    )
    ticket_contract = providers.Singleton(
        TicketContractImpl, address=config_service.provided.TICKET_CONTRACT_ADDRESS
    )

    # Wallet state
    expected_chain = providers.Singleton(build_expected_chain, settings=config_service)
    wallet_state_broadcaster = providers.Singleton(InMemoryEventBroadcasterImpl)
    wallet_monitor = providers.Singleton(
        WalletConnectivityMonitor,
        provider=wallet_provider,
        broadcaster=wallet_state_broadcaster,
        expected_chain=expected_chain,
        poll_interval_seconds=config_service.provided.WALLET_POLL_INTERVAL_SECONDS,
    )

    # Process-wide booking state
    seat_tracker = providers.Singleton(SeatAvailabilityTracker, booking_api_client=booking_api_client)
    reservation_book = providers.Singleton(ReservationBook)
    payment_in_flight_registry = providers.Singleton(PaymentInFlightRegistry)

    ticket_verifier = providers.Singleton(
        TicketVerifier,
        booking_api_client=booking_api_client,
        ticket_contract=ticket_contract,
        wallet_provider=wallet_provider,
    )

    # Payment strategies (session is passed per call)
    conventional_payment_strategy = providers.Singleton(
        ConventionalPaymentStrategy, booking_api_client=booking_api_client
    )
    wallet_payment_strategy = providers.Singleton(
        WalletPaymentStrategy,
        booking_api_client=booking_api_client,
        wallet_monitor=wallet_monitor,
        ticket_contract=ticket_contract,
        gas_limit_multiplier=config_service.provided.GAS_LIMIT_MULTIPLIER,
        fallback_gas_limit=config_service.provided.FALLBACK_GAS_LIMIT,
        fallback_gas_chain_ids=config_service.provided.FALLBACK_GAS_CHAIN_IDS,
    )

    # Per-request components: call with session=... (and hold_manager=... for the orchestrator)
    reservation_hold_manager = providers.Factory(
        ReservationHoldManager,
        booking_api_client=booking_api_client,
        seat_tracker=seat_tracker,
        reservation_book=reservation_book,
        hold_window=providers.Factory(
            timedelta, minutes=config_service.provided.RESERVATION_HOLD_MINUTES
        ),
        tick_seconds=config_service.provided.COUNTDOWN_TICK_SECONDS,
    )
    payment_orchestrator = providers.Factory(
        PaymentOrchestrator,
        seat_tracker=seat_tracker,
        in_flight_registry=payment_in_flight_registry,
        conventional_strategy=conventional_payment_strategy,
        wallet_strategy=wallet_payment_strategy,
    )


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    await container.backend_http_client().aclose()
    await container.wallet_http_client().aclose()
    container.reset_singletons()
