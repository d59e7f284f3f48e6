"""Ticket contract call encoding (Solidity ABI via eth-abi)"""

from typing import Any, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex, function_signature_to_4byte_selector

from src.service.film_booking.app.interface.i_ticket_contract import ITicketContract
from src.service.film_booking.domain.value_object.transaction import TransactionRequest


MINT_TICKET = 'mintTicket(string,uint256,string)'
VERIFY_TICKET = 'verifyTicket(string,string,uint256)'
GET_TICKET_BY_FILM_AND_SEAT = 'getTicketByFilmAndSeat(string,uint256)'
IS_TICKET_VALID = 'isTicketValid(uint256)'


def encode_call(signature: str, args: Sequence[Any]) -> str:
    arg_types = signature[signature.index('(') + 1 : -1].split(',')
    selector = function_signature_to_4byte_selector(signature)
    return encode_hex(selector + encode(arg_types, list(args)))


class TicketContractImpl(ITicketContract):
    def __init__(self, *, address: str) -> None:
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    def build_mint_ticket_call(
        self, *, from_address: str, film_id: str, seat_number: int, metadata_uri: str
    ) -> TransactionRequest:
        return TransactionRequest(
            to=self._address,
            from_address=from_address,
            data=encode_call(MINT_TICKET, [film_id, seat_number, metadata_uri]),
        )

    def build_verify_ticket_call(
        self, *, film_id: str, user_id: str, seat_number: int
    ) -> TransactionRequest:
        return TransactionRequest(
            to=self._address, data=encode_call(VERIFY_TICKET, [film_id, user_id, seat_number])
        )

    def build_get_ticket_by_film_and_seat_call(
        self, *, film_id: str, seat_number: int
    ) -> TransactionRequest:
        return TransactionRequest(
            to=self._address,
            data=encode_call(GET_TICKET_BY_FILM_AND_SEAT, [film_id, seat_number]),
        )

    def build_is_ticket_valid_call(self, *, ticket_id: int) -> TransactionRequest:
        return TransactionRequest(to=self._address, data=encode_call(IS_TICKET_VALID, [ticket_id]))

    @staticmethod
    def _decode_single(abi_type: str, raw: str) -> Any:
        try:
            return decode([abi_type], decode_hex(raw))[0]
        except DecodingError as e:
            raise ValueError(f'Cannot decode {abi_type} from {raw!r}: {e}') from e

    def decode_bool(self, raw: str) -> bool:
        return bool(self._decode_single('bool', raw))

    def decode_uint(self, raw: str) -> int:
        return int(self._decode_single('uint256', raw))
