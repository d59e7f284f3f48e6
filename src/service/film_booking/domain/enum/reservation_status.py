"""Reservation display buckets"""

from enum import StrEnum


class ReservationStatus(StrEnum):
    PENDING = 'pending'
    VERIFIED = 'verified'
    EXPIRED = 'expired'
