import attrs


@attrs.frozen
class RemainingTime:
    minutes_left: int
    seconds_left: int
    percent_left: float  # 0-100, share of the original hold window still left

    @classmethod
    def zero(cls) -> 'RemainingTime':
        return cls(minutes_left=0, seconds_left=0, percent_left=0.0)

    @property
    def is_zero(self) -> bool:
        return self.minutes_left == 0 and self.seconds_left == 0

    @property
    def total_seconds(self) -> int:
        return self.minutes_left * 60 + self.seconds_left
