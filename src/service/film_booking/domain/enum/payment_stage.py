"""In-progress stages of a payment attempt; each can fail with a different remedy."""

from enum import StrEnum


class PaymentStage(StrEnum):
    CONNECTING_WALLET = 'connecting_wallet'
    CONFIRMING_ON_CHAIN = 'confirming_on_chain'
    CONFIRMING_WITH_BACKEND = 'confirming_with_backend'
    CONFIRMING_PAYMENT = 'confirming_payment'
