"""
Unit tests for reservation classification and remaining hold time

The bucket is a pure function of (verified, expires_at, now): verified wins,
then pending while now < expiry, expired otherwise.
"""

from datetime import datetime, timedelta

import pytest

from src.service.film_booking.domain.entity.reservation_entity import (
    classify,
    group_by_status,
    remaining_time,
)
from src.service.film_booking.domain.enum.reservation_status import ReservationStatus
from src.service.film_booking.domain.value_object.remaining_time import RemainingTime


class TestClassify:
    def test_verified_reservation_is_verified_regardless_of_age(
        self, make_reservation, now: datetime
    ) -> None:
        reservation = make_reservation(verified=True, age=timedelta(days=3))

        assert classify(reservation, now) is ReservationStatus.VERIFIED

    def test_fresh_hold_is_pending(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=1))

        assert classify(reservation, now) is ReservationStatus.PENDING

    def test_hold_older_than_window_is_expired(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=16))

        assert classify(reservation, now) is ReservationStatus.EXPIRED

    def test_hold_exactly_at_expiry_is_expired(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=15))

        assert classify(reservation, now) is ReservationStatus.EXPIRED

    def test_backend_expiry_takes_precedence_over_created_at(
        self, make_reservation, now: datetime
    ) -> None:
        reservation = make_reservation(
            age=timedelta(minutes=20), expires_at=now + timedelta(minutes=2)
        )

        assert classify(reservation, now) is ReservationStatus.PENDING

    def test_naive_now_is_treated_as_utc(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=1))

        assert classify(reservation, now.replace(tzinfo=None)) is ReservationStatus.PENDING

    def test_custom_hold_window(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=6))

        assert classify(reservation, now, hold_window=timedelta(minutes=5)) is (
            ReservationStatus.EXPIRED
        )

    @pytest.mark.parametrize(
        'first, second, expected',
        [
            (timedelta(minutes=1), timedelta(minutes=14, seconds=59), ReservationStatus.PENDING),
            (timedelta(minutes=15), timedelta(days=1), ReservationStatus.EXPIRED),
        ],
    )
    def test_times_in_the_same_bucket_classify_alike(
        self,
        make_reservation,
        now: datetime,
        first: timedelta,
        second: timedelta,
        expected: ReservationStatus,
    ) -> None:
        reservation = make_reservation(age=timedelta(0))

        assert classify(reservation, now + first) == classify(reservation, now + second)
        assert classify(reservation, now + first) is expected


class TestRemainingTime:
    def test_remaining_time_of_fresh_hold(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=5))

        assert remaining_time(reservation, now) == RemainingTime(
            minutes_left=10, seconds_left=0, percent_left=pytest.approx(66.666, rel=1e-3)
        )

    def test_remaining_time_rounds_down_to_whole_seconds(
        self, make_reservation, now: datetime
    ) -> None:
        reservation = make_reservation(age=timedelta(minutes=14, seconds=30, milliseconds=500))

        result = remaining_time(reservation, now)

        assert (result.minutes_left, result.seconds_left) == (0, 29)

    def test_expired_hold_has_zero_remaining(self, make_reservation, now: datetime) -> None:
        reservation = make_reservation(age=timedelta(minutes=30))

        result = remaining_time(reservation, now)

        assert result.is_zero
        assert result.percent_left == 0.0

    def test_verified_reservation_has_zero_remaining(
        self, make_reservation, now: datetime
    ) -> None:
        reservation = make_reservation(verified=True)

        assert remaining_time(reservation, now) == RemainingTime.zero()

    def test_percent_is_capped_at_100(self, make_reservation, now: datetime) -> None:
        # Backend expiry further away than a full hold window
        reservation = make_reservation(age=timedelta(0), expires_at=now + timedelta(minutes=30))

        assert remaining_time(reservation, now).percent_left == 100.0

    def test_hold_fourteen_minutes_in_has_one_minute_left(
        self, make_reservation, now: datetime
    ) -> None:
        reservation = make_reservation(age=timedelta(0))
        later = now + timedelta(minutes=14)

        result = remaining_time(reservation, later)

        assert classify(reservation, later) is ReservationStatus.PENDING
        assert (result.minutes_left, result.seconds_left) == (1, 0)

    def test_remaining_time_never_increases(self, make_reservation, now: datetime) -> None:
        """
        Given: a hold created at now
        When: remaining time is read every 7 seconds until well past expiry
        Then: each reading is at most the previous one and the last is zero
        """
        reservation = make_reservation(age=timedelta(0))
        readings = [
            remaining_time(reservation, now + timedelta(seconds=offset))
            for offset in range(0, 20 * 60, 7)
        ]

        seconds = [r.minutes_left * 60 + r.seconds_left for r in readings]
        percents = [r.percent_left for r in readings]
        assert all(later <= earlier for earlier, later in zip(seconds, seconds[1:]))
        assert all(later <= earlier for earlier, later in zip(percents, percents[1:]))
        assert readings[-1].is_zero


class TestGroupByStatus:
    def test_every_bucket_is_present(self, now: datetime) -> None:
        groups = group_by_status([], now)

        assert set(groups) == set(ReservationStatus)
        assert all(members == [] for members in groups.values())

    def test_reservations_are_grouped(self, make_reservation, now: datetime) -> None:
        pending = make_reservation(reservation_id='pending')
        verified = make_reservation(reservation_id='verified', verified=True)
        expired = make_reservation(reservation_id='expired', age=timedelta(hours=1))

        groups = group_by_status([pending, verified, expired], now)

        assert groups[ReservationStatus.PENDING] == [pending]
        assert groups[ReservationStatus.VERIFIED] == [verified]
        assert groups[ReservationStatus.EXPIRED] == [expired]


class TestMarkAsVerified:
    def test_mark_as_verified_copies_proof(self, make_reservation, proof) -> None:
        reservation = make_reservation(expires_at=datetime(2026, 3, 1, 12, 10))

        verified = reservation.mark_as_verified(proof)

        assert verified.verified
        assert verified.expires_at is None
        assert verified.transaction_hash == proof.transaction_hash
        assert verified.block_index == proof.block_index
        assert verified.wallet_address == proof.wallet_address
        # Original untouched
        assert not reservation.verified
