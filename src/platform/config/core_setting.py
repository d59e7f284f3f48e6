from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


def _split_comma_list(v: str | List) -> List:
    if isinstance(v, str) and not v.startswith('['):
        return [i.strip() for i in v.split(',') if i.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Cinechain Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Backend REST API
    BACKEND_API_URL: str = 'http://localhost:5000/api'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, (str, list)):
            return _split_comma_list(v)
        return []

    # Reservation hold
    RESERVATION_HOLD_MINUTES: int = 15
    COUNTDOWN_TICK_SECONDS: float = 1.0  # UI countdown must refresh at >= 1 Hz

    # Wallet / signer
    WALLET_RPC_URL: str = 'http://localhost:8545'
    WALLET_POLL_INTERVAL_SECONDS: float = 2.0

    # Expected network (defaults to the Sepolia test network)
    EXPECTED_CHAIN_ID: int = 11155111
    NETWORK_NAME: str = 'Sepolia'
    NETWORK_RPC_URL: str = 'https://rpc.sepolia.org/'
    NETWORK_EXPLORER_URL: str = 'https://sepolia.etherscan.io/'
    NATIVE_CURRENCY_NAME: str = 'ETH'
    NATIVE_CURRENCY_SYMBOL: str = 'ETH'
    NATIVE_CURRENCY_DECIMALS: int = 18

    # Ticket contract
    TICKET_CONTRACT_ADDRESS: str = ''
    GAS_LIMIT_MULTIPLIER: float = 1.2
    FALLBACK_GAS_LIMIT: int = 500_000
    FALLBACK_GAS_CHAIN_IDS: List[int] = [11155111]
    TX_CONFIRMATION_POLL_SECONDS: float = 1.0

    @field_validator('FALLBACK_GAS_CHAIN_IDS', mode='before')
    @classmethod
    def assemble_fallback_gas_chain_ids(cls, v: str | List[int]) -> List[int]:
        if isinstance(v, str) and not v.startswith('['):
            return [int(i) for i in _split_comma_list(v)]
        return v

    @property
    def RESERVATION_HOLD_MILLISECONDS(self) -> int:
        return self.RESERVATION_HOLD_MINUTES * 60 * 1000


settings = Settings()  # type: ignore
