"""Per-user serialization of analysis runs"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from finance_insights.domain.engine import AnalysisParams, analyze
from finance_insights.domain.models import AnalysisResult

logger = logging.getLogger(__name__)

Snapshot = Tuple[Iterable[Any], Iterable[Any]]  # (transactions, incomes)
SnapshotLoader = Callable[[], Awaitable[Snapshot]]


@dataclass
class RunOutcome:
    """Result of one coordinated run and whether it became the user's latest"""

    result: AnalysisResult
    generation: int
    published: bool


class AnalysisCoordinator:
    """
    Serializes analysis runs per user and keeps the latest published result.

    Runs for the same user never overlap. Every run is numbered when it is
    requested; if a newer run was requested while this one was in flight, its
    result is still handed back to its own caller but is not published as the
    user's latest. A user's lock and run numbering are dropped once no run is
    in flight or queued, so numbering restarts with the next burst of runs.
    """

    def __init__(self, params: Optional[AnalysisParams] = None):
        self.params = params or AnalysisParams()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._requested: Dict[str, int] = {}
        self._pending: Dict[str, int] = {}
        self._latest: Dict[str, AnalysisResult] = {}

    async def run(
        self,
        user_id: str,
        loader: SnapshotLoader,
        now: Optional[datetime] = None,
    ) -> RunOutcome:
        """
        Load a snapshot and analyze it under the user's lock.

        Exceptions from the loader propagate unchanged; the engine itself is
        deterministic and is never retried here.
        """
        generation = self._requested.get(user_id, 0) + 1
        self._requested[user_id] = generation
        self._pending[user_id] = self._pending.get(user_id, 0) + 1
        lock = self._locks.setdefault(user_id, asyncio.Lock())

        try:
            async with lock:
                transactions, incomes = await loader()
                result = analyze(transactions, incomes, now=now, params=self.params)

                published = generation == self._requested[user_id]
                if published:
                    self._latest[user_id] = result
                else:
                    logger.info(
                        "Discarding superseded analysis run",
                        extra={"user_id": user_id, "generation": generation},
                    )
        finally:
            self._release(user_id)

        return RunOutcome(result=result, generation=generation, published=published)

    def _release(self, user_id: str) -> None:
        self._pending[user_id] -= 1
        if self._pending[user_id] == 0:
            del self._pending[user_id]
            del self._locks[user_id]
            del self._requested[user_id]

    def active_users(self) -> List[str]:
        """Users with a run in flight or queued"""
        return list(self._pending)

    def latest(self, user_id: str) -> Optional[AnalysisResult]:
        """Last published result for the user, if any"""
        return self._latest.get(user_id)
