"""Server-side PENDING -> LIVE transition and the timers that drive it.

A single scheduler tick owns the transition, so clients never race to
write it. The write is a compare-and-set: a match that is already LIVE
(or was edited meanwhile) is left alone.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Callable, Iterable, Optional, Protocol

from neo4j.exceptions import DriverError, Neo4jError

from .match_status import LIVE_WINDOW_MINUTES, classify, is_in_live_window, league_now
from .models import PENDING, SCHEDULED, Match, Matchday, MatchLiveStatus, SweepResult

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class MatchStore(Protocol):
    def get_all_matchdays(self) -> list[Matchday]: ...

    def mark_match_live(self, matchday_id: str, match: Match) -> bool: ...


@dataclass
class LiveTransition:
    matchday: Matchday
    match: Match

    @property
    def label(self) -> str:
        return f"{self.match.home}-{self.match.away}"


def plan_live_transitions(
    matchdays: Iterable[Matchday],
    now: datetime,
    live_window: int = LIVE_WINDOW_MINUTES,
) -> list[LiveTransition]:
    """Pending matches whose kickoff window is open at ``now``."""
    return [
        LiveTransition(matchday, match)
        for matchday in matchdays
        for match in matchday.matches
        if match.status in (PENDING, SCHEDULED) and is_in_live_window(match, now, live_window)
    ]


def run_live_sweep(
    store: MatchStore,
    now: datetime,
    live_window: int = LIVE_WINDOW_MINUTES,
    matchdays: Optional[list[Matchday]] = None,
) -> SweepResult:
    """Write LIVE for every match whose window has started.

    A failed write is logged and counted; the remaining matches are still
    processed.
    """
    if matchdays is None:
        matchdays = store.get_all_matchdays()

    result = SweepResult(checked=sum(len(md.matches) for md in matchdays))
    for transition in plan_live_transitions(matchdays, now, live_window):
        try:
            changed = store.mark_match_live(transition.matchday.matchday_id, transition.match)
        except (Neo4jError, DriverError) as exc:
            LOGGER.error(
                "Failed to mark %s (jornada %d) as LIVE: %s",
                transition.label, transition.matchday.jornada, exc,
            )
            result.failed += 1
            continue
        if changed:
            LOGGER.info(
                "Jornada %d: %s is now LIVE", transition.matchday.jornada, transition.label
            )
            result.transitioned += 1
            result.matches.append(transition.label)
    return result


class PeriodicTask:
    """Run a blocking job every ``interval`` seconds on a background asyncio task.

    Use as an async context manager; the task is cancelled on exit.
    """

    def __init__(self, interval: float, job: Callable[[], object], name: str = "periodic-task"):
        self.interval = interval
        self.job = job
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.to_thread(self.job)
            except Exception:
                LOGGER.exception("%s tick failed", self.name)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    async def __aenter__(self) -> "PeriodicTask":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


async def live_status_feed(
    matches: list[Match],
    clock: Optional[Clock] = None,
    interval: float = 30,
    live_window: int = LIVE_WINDOW_MINUTES,
) -> AsyncIterator[list[MatchLiveStatus]]:
    """Re-classify ``matches`` every ``interval`` seconds.

    ``clock`` defaults to the league wall clock. Closing the generator
    stops the refresh.
    """
    if clock is None:
        clock = league_now
    while True:
        now = clock()
        yield [classify(match, now, live_window) for match in matches]
        await asyncio.sleep(interval)
