"""DailyTokenCounter: the last token handed out on a given store day."""

from __future__ import annotations

from dataclasses import dataclass

from canteen.domain.exceptions import ValidationError

BASE_TOKEN = 101


@dataclass(frozen=True)
class DailyTokenCounter:
    """Counter record keyed by calendar date.

    A missing counter means no token has been issued that day yet, so the
    next one is ``BASE_TOKEN``.
    """

    date: str
    value: int

    def __post_init__(self) -> None:
        if self.value < BASE_TOKEN:
            raise ValidationError(
                f"Token counter for {self.date} cannot be below {BASE_TOKEN}"
            )

    @staticmethod
    def next_value(current: DailyTokenCounter | None) -> int:
        if current is None:
            return BASE_TOKEN
        return current.value + 1
