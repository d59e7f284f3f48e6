"""
Ticket Verifier

Checks whether a user holds a valid ticket for a seat. The backend answer is
preferred; the ticket contract is consulted only when the backend cannot
answer. Never raises: any method failing falls through to the next one and
the final answer is False.
"""

from typing import Dict, Iterable, Optional

import anyio

from src.platform.exception.exceptions import FetchError
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.app.interface.i_ticket_contract import ITicketContract
from src.service.film_booking.app.interface.i_wallet_provider import (
    IWalletProvider,
    ProviderRpcError,
)


class TicketVerifier:
    def __init__(
        self,
        *,
        booking_api_client: IBookingApiClient,
        ticket_contract: ITicketContract,
        wallet_provider: Optional[IWalletProvider],
    ) -> None:
        self.booking_api_client = booking_api_client
        self.ticket_contract = ticket_contract
        self.wallet_provider = wallet_provider

    @Logger.io
    async def verify(self, *, film_id: str, user_id: str, seat_number: int) -> bool:
        try:
            return await self.booking_api_client.verify_reservation(
                film_id=film_id, user_id=user_id, seat_number=seat_number
            )
        except FetchError as e:
            Logger.base.warning(
                f'[VERIFY] API verification failed for {film_id}#{seat_number}, '
                f'trying the ticket contract: {e.message}'
            )

        if self.wallet_provider is None or not self.ticket_contract.is_configured:
            Logger.base.warning('[VERIFY] Ticket contract not available for direct verification')
            return False

        return await self._verify_on_chain(
            self.wallet_provider, film_id=film_id, user_id=user_id, seat_number=seat_number
        )

    async def _verify_on_chain(
        self, provider: IWalletProvider, *, film_id: str, user_id: str, seat_number: int
    ) -> bool:
        contract = self.ticket_contract

        try:
            raw = await provider.call(
                tx=contract.build_verify_ticket_call(
                    film_id=film_id, user_id=user_id, seat_number=seat_number
                )
            )
            return contract.decode_bool(raw)
        except (ProviderRpcError, ValueError) as e:
            Logger.base.warning(f'[VERIFY] verifyTicket failed, trying ticket lookup: {e}')

        try:
            raw_ticket_id = await provider.call(
                tx=contract.build_get_ticket_by_film_and_seat_call(
                    film_id=film_id, seat_number=seat_number
                )
            )
            ticket_id = contract.decode_uint(raw_ticket_id)
            if not ticket_id:
                return False
            raw_valid = await provider.call(tx=contract.build_is_ticket_valid_call(ticket_id=ticket_id))
            return contract.decode_bool(raw_valid)
        except (ProviderRpcError, ValueError) as e:
            Logger.base.warning(f'[VERIFY] Ticket lookup failed: {e}')

        return False

    @Logger.io
    async def verify_batch(
        self, *, film_id: str, user_id: str, seat_numbers: Iterable[int]
    ) -> Dict[int, bool]:
        results: Dict[int, bool] = {}

        async def verify_one(seat_number: int) -> None:
            results[seat_number] = await self.verify(
                film_id=film_id, user_id=user_id, seat_number=seat_number
            )

        async with anyio.create_task_group() as tg:
            for seat_number in dict.fromkeys(seat_numbers):
                tg.start_soon(verify_one, seat_number)

        Logger.base.info(f'[VERIFY] Batch for film {film_id}: {results}')
        return results
