from src.service.film_booking.domain.value_object.chain_descriptor import ChainDescriptor
from src.service.film_booking.domain.value_object.network_status import NetworkStatus
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof
from src.service.film_booking.domain.value_object.remaining_time import RemainingTime
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.domain.value_object.transaction import (
    TransactionReceipt,
    TransactionRequest,
)


__all__ = [
    'ChainDescriptor',
    'NetworkStatus',
    'PaymentProof',
    'RemainingTime',
    'SessionContext',
    'TransactionReceipt',
    'TransactionRequest',
]
