from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.service.film_booking.app.dto import PaymentResult
from src.service.film_booking.domain.entity.reservation_entity import Reservation
from src.service.film_booking.domain.enum.payment_method import PaymentMethod
from src.service.film_booking.domain.enum.reservation_status import ReservationStatus
from src.service.film_booking.domain.value_object.remaining_time import RemainingTime
from src.service.film_booking.driving_adapter.http_controller.schema.notification_schema import (
    NotificationResponse,
)


class CreateHoldRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'film_id': '65f1c0ffee', 'seat_number': 5}}}

    film_id: str
    seat_number: int = Field(ge=1)


class PaymentRequest(BaseModel):
    method: PaymentMethod = PaymentMethod.CONVENTIONAL


class RemainingTimeResponse(BaseModel):
    minutes_left: int
    seconds_left: int
    percent_left: float

    @classmethod
    def from_value(cls, remaining: RemainingTime) -> 'RemainingTimeResponse':
        return cls(
            minutes_left=remaining.minutes_left,
            seconds_left=remaining.seconds_left,
            percent_left=round(remaining.percent_left, 2),
        )


class ReservationResponse(BaseModel):
    id: str
    film_id: str
    film_title: Optional[str] = None
    user_id: str
    seat_number: int
    verified: bool
    status: ReservationStatus
    created_at: datetime
    expires_at: Optional[datetime] = None
    remaining: RemainingTimeResponse
    block_index: Optional[int] = None
    transaction_hash: Optional[str] = None
    wallet_address: Optional[str] = None

    @classmethod
    def from_entity(
        cls, reservation: Reservation, *, status: ReservationStatus, remaining: RemainingTime
    ) -> 'ReservationResponse':
        return cls(
            id=reservation.id,
            film_id=reservation.film_id,
            film_title=reservation.film_title,
            user_id=reservation.user_id,
            seat_number=reservation.seat_number,
            verified=reservation.verified,
            status=status,
            created_at=reservation.created_at,
            expires_at=reservation.expires_at,
            remaining=RemainingTimeResponse.from_value(remaining),
            block_index=reservation.block_index,
            transaction_hash=reservation.transaction_hash,
            wallet_address=reservation.wallet_address,
        )


class HoldResponse(BaseModel):
    reservation: ReservationResponse
    notification: NotificationResponse


class ReservationGroupsResponse(BaseModel):
    pending: List[ReservationResponse] = []
    verified: List[ReservationResponse] = []
    expired: List[ReservationResponse] = []


class PaymentResponse(BaseModel):
    reservation: ReservationResponse
    method: PaymentMethod
    amount: float
    proof: Optional[Dict[str, object]] = None
    notification: NotificationResponse

    @classmethod
    def from_result(
        cls,
        result: PaymentResult,
        *,
        status: ReservationStatus,
        remaining: RemainingTime,
        notification: NotificationResponse,
    ) -> 'PaymentResponse':
        return cls(
            reservation=ReservationResponse.from_entity(
                result.reservation, status=status, remaining=remaining
            ),
            method=result.method,
            amount=result.amount,
            proof=result.proof.to_payload() if result.proof else None,
            notification=notification,
        )


class VerifyTicketResponse(BaseModel):
    film_id: str
    seat_number: int
    verified: bool
