from typing import Any, List, Optional, Type, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from src.platform.exception.exceptions import FetchError
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.dto import CreateReservationRequest, FilmDetail, PaymentDetails
from src.service.film_booking.app.interface.i_booking_api_client import IBookingApiClient
from src.service.film_booking.domain.entity.film_entity import Film
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.value_object.session_context import SessionContext
from src.service.film_booking.driven_adapter.backend.backend_payload_mapper import (
    to_film,
    to_film_detail,
    to_reservation,
)
from src.service.film_booking.driven_adapter.backend.backend_payload_schema import (
    BookedSeatsPayload,
    FilmDetailPayload,
    FilmPayload,
    ReservationPayload,
    VerifyReservationPayload,
)


_M = TypeVar('_M', bound=BaseModel)


class BookingApiClientImpl(IBookingApiClient):
    """
    httpx implementation of the backend REST API

    Bodies are (de)serialized with orjson. Transport errors and non-2xx
    answers become FetchError; upstream_status tells the two apart.
    """

    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self.http_client = http_client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session: Optional[SessionContext] = None,
        json_body: Optional[dict] = None,
    ) -> Any:
        headers = {'Accept': 'application/json'}
        if session is not None:
            headers |= session.auth_headers()
        content: Optional[bytes] = None
        if json_body is not None:
            content = orjson.dumps(json_body)
            headers['Content-Type'] = 'application/json'

        try:
            response = await self.http_client.request(method, path, headers=headers, content=content)
        except httpx.HTTPError as e:
            raise FetchError(f'Backend unreachable ({method} {path}): {e}') from e

        if response.is_error:
            raise FetchError(
                self._error_message(response), upstream_status=response.status_code
            )
        if not response.content:
            return None
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise FetchError(f'Invalid JSON from {method} {path}') from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            data = None
        if isinstance(data, dict) and (message := data.get('message') or data.get('error')):
            return str(message)
        return f'{response.status_code} {response.reason_phrase}'.strip()

    @staticmethod
    def _parse(model: Type[_M], data: Any) -> _M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise FetchError(f'Unexpected {model.__name__} from backend: {e.error_count()} error(s)') from e

    @staticmethod
    def _unwrap(data: Any, key: str) -> Any:
        if isinstance(data, dict) and key in data:
            return data[key]
        return data

    def _to_reservation(self, data: Any) -> Reservation:
        return to_reservation(self._parse(ReservationPayload, self._unwrap(data, 'reservation')))

    @Logger.io
    async def list_films(self) -> List[Film]:
        data = self._unwrap(await self._request('GET', '/film'), 'films')
        if not isinstance(data, list):
            raise FetchError('Unexpected film list from backend')
        return [to_film(self._parse(FilmPayload, item)) for item in data]

    @Logger.io
    async def get_film(self, *, film_id: str) -> FilmDetail:
        payload = self._parse(FilmDetailPayload, await self._request('GET', f'/film/{film_id}'))
        try:
            return to_film_detail(payload)
        except ValueError as e:
            raise FetchError(f'Film {film_id}: {e}') from e

    @Logger.io
    async def get_booked_seats(self, *, film_id: str) -> List[int]:
        data = await self._request('GET', f'/film/{film_id}/seats')
        return self._parse(BookedSeatsPayload, data or {}).booked_seats

    @Logger.io
    async def create_reservation(
        self, *, session: SessionContext, request: CreateReservationRequest
    ) -> Reservation:
        data = await self._request(
            'POST', '/reservations', session=session, json_body=request.to_payload()
        )
        return self._to_reservation(data)

    @Logger.io
    async def submit_payment(
        self, *, session: SessionContext, reservation_id: str, payment: PaymentDetails
    ) -> Optional[Reservation]:
        data = await self._request(
            'POST',
            f'/reservation/payment/{reservation_id}',
            session=session,
            json_body=payment.to_payload(),
        )
        data = self._unwrap(data, 'reservation')
        if not isinstance(data, dict) or '_id' not in data:
            return None
        return self._to_reservation(data)

    @Logger.io
    async def list_user_reservations(
        self, *, session: SessionContext, user_id: str
    ) -> List[Reservation]:
        data = self._unwrap(
            await self._request('GET', f'/reservations/{user_id}', session=session),
            'reservations',
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchError('Unexpected reservation list from backend')
        return [self._to_reservation(item) for item in data]

    @Logger.io
    async def verify_reservation(self, *, film_id: str, user_id: str, seat_number: int) -> bool:
        data = await self._request('GET', f'/reservations/verify/{film_id}/{user_id}/{seat_number}')
        return self._parse(VerifyReservationPayload, data or {}).verified is True
