from enum import StrEnum


class WalletState(StrEnum):
    DISCONNECTED = 'disconnected'
    NETWORK_UNKNOWN = 'network_unknown'
    ON_EXPECTED_NETWORK = 'on_expected_network'
    WRONG_NETWORK = 'wrong_network'
