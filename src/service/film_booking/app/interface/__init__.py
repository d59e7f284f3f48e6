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


__all__ = [
    'IBookingApiClient',
    'IPaymentStrategy',
    'ITicketContract',
    'IWalletProvider',
    'ProviderRpcError',
    'StageReporter',
]
