"""
Test Configuration

Environment setup MUST happen before any application import: the settings
object and the loguru sinks are built at import time.

Architecture:
- Unit tests (test/**/unit/): collaborators are AsyncMocks, no network
- Controller tests: real container wiring with the driven adapters overridden
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Never reach a real backend or signer from the test suite
    os.environ['BACKEND_API_URL'] = 'http://backend.test/api'
    os.environ['WALLET_RPC_URL'] = 'http://wallet.test'
    os.environ['EXPECTED_CHAIN_ID'] = '11155111'
    os.environ['TICKET_CONTRACT_ADDRESS'] = '0x' + '11' * 20
    os.environ['COUNTDOWN_TICK_SECONDS'] = '0.01'
    os.environ['WALLET_POLL_INTERVAL_SECONDS'] = '0.01'
    os.environ['TX_CONFIRMATION_POLL_SECONDS'] = '0'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Callable  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Optional  # noqa: E402

import pytest  # noqa: E402

from src.service.film_booking.domain.entity.film_entity import Film  # noqa: E402
from src.service.film_booking.domain.entity.reservation_entity import Reservation  # noqa: E402
from src.service.film_booking.domain.value_object.chain_descriptor import (  # noqa: E402
    ChainDescriptor,
)
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof  # noqa: E402
from src.service.film_booking.domain.value_object.session_context import (  # noqa: E402
    SessionContext,
)


FILM_ID = 'film-1'
USER_ID = 'user-1'
OTHER_USER_ID = 'user-2'
WALLET_ADDRESS = '0x' + 'ab' * 20
EXPECTED_CHAIN_ID = 11155111
WRONG_CHAIN_ID = 1
TX_HASH = '0x' + 'cd' * 32
NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def film() -> Film:
    return Film(id=FILM_ID, name='Inception', price=12.5, seat_capacity=50, duration=148)


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(token='token-123', user_id=USER_ID)


@pytest.fixture
def expected_chain() -> ChainDescriptor:
    return ChainDescriptor(
        chain_id=EXPECTED_CHAIN_ID,
        chain_name='Sepolia',
        rpc_urls=('https://rpc.sepolia.org/',),
        block_explorer_urls=('https://sepolia.etherscan.io/',),
    )


@pytest.fixture
def proof() -> PaymentProof:
    return PaymentProof(wallet_address=WALLET_ADDRESS, transaction_hash=TX_HASH, block_index=4242)


@pytest.fixture
def make_reservation() -> Callable[..., Reservation]:
    """Factory for reservations created `age` before NOW."""

    def _make(
        *,
        reservation_id: str = 'res-1',
        seat_number: int = 7,
        verified: bool = False,
        age: timedelta = timedelta(minutes=1),
        expires_at: Optional[datetime] = None,
        user_id: str = USER_ID,
        film_id: str = FILM_ID,
        **overrides: Any,
    ) -> Reservation:
        return Reservation(
            id=reservation_id,
            film_id=film_id,
            user_id=user_id,
            seat_number=seat_number,
            created_at=NOW - age,
            verified=verified,
            expires_at=expires_at,
            **overrides,
        )

    return _make
