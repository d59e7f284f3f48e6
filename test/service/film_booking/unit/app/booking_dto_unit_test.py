import pytest

from src.service.film_booking.app.dto import (
    CreateReservationRequest,
    PaymentDetails,
    WalletStateChanged,
)
from src.service.film_booking.domain.entity.wallet_session_entity import WalletSession
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.wallet_state import WalletState


class TestCreateReservationRequest:
    def test_verified_request_requires_proof(self) -> None:
        with pytest.raises(ValueError):
            CreateReservationRequest(
                user_id='user-1', film_id='film-1', seat_number=3, blockchain_verified=True
            )

    def test_hold_request_payload_has_no_chain_fields(self) -> None:
        request = CreateReservationRequest(user_id='user-1', film_id='film-1', seat_number=3)

        assert request.to_payload() == {
            'userId': 'user-1',
            'filmId': 'film-1',
            'seatNumber': 3,
            'blockchainVerified': False,
        }


class TestPaymentDetails:
    def test_conventional_payment_sends_method_and_amount_only(self) -> None:
        payment = PaymentDetails(payment_method=PaymentMethod.CONVENTIONAL, amount=9.5)

        assert payment.to_payload() == {
            'paymentDetails': {'paymentMethod': 'conventional', 'amount': 9.5}
        }

    def test_blockchain_payment_sends_proof(self, proof) -> None:
        payment = PaymentDetails(payment_method=PaymentMethod.BLOCKCHAIN, amount=9.5, proof=proof)

        details = payment.to_payload()['paymentDetails']
        assert details['transactionHash'] == proof.transaction_hash
        assert details['blockIndex'] == proof.block_index
        assert details['walletAddress'] == proof.wallet_address


class TestWalletStateChanged:
    def test_from_session(self) -> None:
        session = WalletSession.connected_to('0x' + 'ab' * 20).with_chain(1)

        event = WalletStateChanged.from_session(session, expected_chain_id=11155111)

        assert event.state is WalletState.WRONG_NETWORK
        assert event.to_event_data()['event_type'] == 'wallet_state_changed'
