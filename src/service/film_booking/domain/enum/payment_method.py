from enum import StrEnum


class PaymentMethod(StrEnum):
    CONVENTIONAL = 'conventional'
    BLOCKCHAIN = 'blockchain'
