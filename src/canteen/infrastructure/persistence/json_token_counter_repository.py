"""JSON-file-backed implementation of TokenCounterRepository.

Stored as a single object mapping date keys to the last issued token.
"""

from __future__ import annotations

from pathlib import Path

from canteen.domain.model.token_counter import DailyTokenCounter
from canteen.domain.repository.token_counter_repository import TokenCounterRepository
from canteen.infrastructure.persistence.json_file import JsonFile


class JsonTokenCounterRepository(TokenCounterRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, {})

    def get(self, for_date: str) -> DailyTokenCounter | None:
        value = self._file.read().get(for_date)
        if value is None:
            return None
        return DailyTokenCounter(date=for_date, value=value)

    def compare_and_set(
        self,
        for_date: str,
        expected: int | None,
        new_value: int,
    ) -> bool:
        with self._file.lock:
            counters = self._file.read()
            if counters.get(for_date) != expected:
                return False
            counters[for_date] = new_value
            self._file.write(counters)
            return True
