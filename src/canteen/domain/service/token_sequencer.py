"""Domain service: Token Sequencer.

Hands out the short order numbers called at the counter.  Tokens restart
at ``BASE_TOKEN`` every store day and must never repeat within a day, so
each assignment is an optimistic read-modify-write against the counter
repository, retried a bounded number of times.
"""

from __future__ import annotations

from datetime import date, datetime

import structlog

from canteen.domain.clock import date_key
from canteen.domain.exceptions import TransactionConflictError
from canteen.domain.model.token_counter import DailyTokenCounter
from canteen.domain.repository.token_counter_repository import TokenCounterRepository

logger = structlog.get_logger()

MAX_TRANSACTION_ATTEMPTS = 5


class TokenSequencer:

    def __init__(
        self,
        counter_repo: TokenCounterRepository,
        max_attempts: int = MAX_TRANSACTION_ATTEMPTS,
    ) -> None:
        self._counter_repo = counter_repo
        self._max_attempts = max_attempts

    def next_token(self, for_date: date | datetime | str) -> int:
        key = date_key(for_date)
        for attempt in range(1, self._max_attempts + 1):
            current = self._counter_repo.get(key)
            token = DailyTokenCounter.next_value(current)
            expected = current.value if current is not None else None
            if self._counter_repo.compare_and_set(key, expected, token):
                logger.info("token_assigned", date=key, token=token, attempt=attempt)
                return token
            logger.debug("token_conflict", date=key, attempt=attempt)

        logger.warning("token_transaction_failed", date=key, attempts=self._max_attempts)
        raise TransactionConflictError(
            f"Could not assign a token for {key} after {self._max_attempts} attempts"
        )
