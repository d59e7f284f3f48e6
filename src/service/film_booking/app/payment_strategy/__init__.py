from src.service.film_booking.app.payment_strategy.conventional_payment_strategy import (
    ConventionalPaymentStrategy,
)
from src.service.film_booking.app.payment_strategy.wallet_payment_strategy import (
    WalletPaymentStrategy,
)


__all__ = [
    'ConventionalPaymentStrategy',
    'WalletPaymentStrategy',
]
