from typing import Optional

import attrs

from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.value_object.payment_proof import PaymentProof


@attrs.define
class CreateReservationRequest:
    """
    Body of POST /reservations

    blockchain_verified=False makes the backend start the 15-minute hold;
    True records an already paid seat and requires the on-chain proof.
    """

    user_id: str
    film_id: str
    seat_number: int
    blockchain_verified: bool = False
    proof: Optional[PaymentProof] = None

    def __attrs_post_init__(self) -> None:
        if self.blockchain_verified and self.proof is None:
            raise ValueError('A blockchain-verified reservation requires a payment proof')

    def to_payload(self) -> dict:
        payload: dict = {
            'userId': self.user_id,
            'filmId': self.film_id,
            'seatNumber': self.seat_number,
            'blockchainVerified': self.blockchain_verified,
        }
        if self.proof is not None:
            payload |= self.proof.to_payload()
        return payload


@attrs.define
class PaymentDetails:
    """Body of POST /reservation/payment/{id}; proof fields only for blockchain payments"""

    payment_method: PaymentMethod
    amount: float
    proof: Optional[PaymentProof] = None

    def to_payload(self) -> dict:
        details: dict = {'paymentMethod': self.payment_method.value, 'amount': self.amount}
        if self.proof is not None:
            details |= self.proof.to_payload()
        return {'paymentDetails': details}
