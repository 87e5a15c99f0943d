"""Abstract repository for DailyTokenCounter records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.model.token_counter import DailyTokenCounter


class TokenCounterRepository(ABC):

    @abstractmethod
    def get(self, for_date: str) -> DailyTokenCounter | None:
        """Return the counter for a date key, or None if none was issued."""

    @abstractmethod
    def compare_and_set(
        self,
        for_date: str,
        expected: int | None,
        new_value: int,
    ) -> bool:
        """Store *new_value* only if the current value equals *expected*.

        ``expected=None`` means "no counter exists yet".  Returns False when
        another writer got there first.
        """
