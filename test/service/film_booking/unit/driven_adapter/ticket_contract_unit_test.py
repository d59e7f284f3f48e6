from eth_abi import decode, encode
from eth_utils import decode_hex, encode_hex, function_signature_to_4byte_selector
import pytest

from src.service.film_booking.driven_adapter.wallet.ticket_contract_impl import (
    GET_TICKET_BY_FILM_AND_SEAT,
    MINT_TICKET,
    TicketContractImpl,
)


CONTRACT_ADDRESS = '0x' + '11' * 20
ADDRESS = '0x' + 'ab' * 20


class TestTicketContract:
    @pytest.fixture
    def contract(self) -> TicketContractImpl:
        return TicketContractImpl(address=CONTRACT_ADDRESS)

    def test_mint_ticket_call_data(self, contract: TicketContractImpl) -> None:
        tx = contract.build_mint_ticket_call(
            from_address=ADDRESS,
            film_id='film-1',
            seat_number=7,
            metadata_uri='data:application/json;base64,e30=',
        )

        raw = decode_hex(tx.data)
        assert tx.to == CONTRACT_ADDRESS
        assert tx.from_address == ADDRESS
        assert raw[:4] == function_signature_to_4byte_selector(MINT_TICKET)
        assert decode(['string', 'uint256', 'string'], raw[4:]) == (
            'film-1',
            7,
            'data:application/json;base64,e30=',
        )

    def test_lookup_call_has_no_sender(self, contract: TicketContractImpl) -> None:
        tx = contract.build_get_ticket_by_film_and_seat_call(film_id='film-1', seat_number=7)

        raw = decode_hex(tx.data)
        assert tx.from_address is None
        assert raw[:4] == function_signature_to_4byte_selector(GET_TICKET_BY_FILM_AND_SEAT)
        assert decode(['string', 'uint256'], raw[4:]) == ('film-1', 7)

    def test_decode_results(self, contract: TicketContractImpl) -> None:
        assert contract.decode_bool(encode_hex(encode(['bool'], [True]))) is True
        assert contract.decode_uint(encode_hex(encode(['uint256'], [42]))) == 42

    def test_decode_empty_result_raises_value_error(self, contract: TicketContractImpl) -> None:
        with pytest.raises(ValueError):
            contract.decode_bool('0x')

    def test_is_configured(self) -> None:
        assert TicketContractImpl(address=CONTRACT_ADDRESS).is_configured
        assert not TicketContractImpl(address='').is_configured
