"""
In-flight payment registry

Shared by every PaymentOrchestrator of the process. A key is claimed
synchronously, before the first await, so a concurrent second attempt for
the same key fails immediately instead of racing the first one.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from src.platform.exception.exceptions import AlreadyInProgress
from src.platform.logging.loguru_io import Logger
from src.service.film_booking.app.interface.i_payment_strategy import StageReporter
from src.service.film_booking.domain.enum.payment_stage import PaymentStage


class PaymentInFlightRegistry:
    def __init__(self) -> None:
        # key -> current stage (None until the strategy reports one)
        self._in_flight: Dict[str, Optional[PaymentStage]] = {}

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    def stage(self, key: str) -> Optional[PaymentStage]:
        return self._in_flight.get(key)

    def in_flight(self) -> Dict[str, Optional[PaymentStage]]:
        return dict(self._in_flight)

    @contextmanager
    def claim(self, key: str) -> Iterator[StageReporter]:
        """
        Hold the key for the duration of one payment attempt

        Raises:
            AlreadyInProgress: the key is already claimed
        """
        if key in self._in_flight:
            raise AlreadyInProgress(f'A payment for {key} is already in progress')
        self._in_flight[key] = None

        def report_stage(stage: PaymentStage) -> None:
            Logger.base.info(f'[PAYMENT] {key}: {stage}')
            self._in_flight[key] = stage

        try:
            yield report_stage
        finally:
            del self._in_flight[key]
