"""Abstract repository for the store's open/closed flag."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StoreStatusRepository(ABC):

    @abstractmethod
    def is_open(self) -> bool:
        """True while the canteen accepts orders."""

    @abstractmethod
    def set_open(self, is_open: bool) -> None:
        """Toggle the flag."""
