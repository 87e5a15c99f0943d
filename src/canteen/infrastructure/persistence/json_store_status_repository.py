"""JSON-file-backed implementation of StoreStatusRepository."""

from __future__ import annotations

from pathlib import Path

from canteen.domain.repository.store_status_repository import StoreStatusRepository
from canteen.infrastructure.persistence.json_file import JsonFile


class JsonStoreStatusRepository(StoreStatusRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, {"is_open": True})

    def is_open(self) -> bool:
        return bool(self._file.read().get("is_open", True))

    def set_open(self, is_open: bool) -> None:
        with self._file.lock:
            self._file.write({"is_open": is_open})
