"""Bounded beam search over a sequence of events.

The pool is generic in the hand it drives: a ``HandDriver`` says what the
candidate targets of an event are and how a state moves to one of them.
The same pool runs the fretting hand over pitch events and the plucking
hand over string events.

Beams share their history through ``PChain``, so extending a beam never
copies it. Live beams sit in a persistent heap ordered worst-first, which
makes evicting the worst beam after an insertion an O(log K) step.
"""

from __future__ import annotations

import logging
import time
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from fretdance.base import ConfigError, EmptyPoolError
from fretdance.spiny.chain import PChain
from fretdance.spiny.common import Entry, Flip, Impossible
from fretdance.spiny.heap import PHeap


@dataclass(frozen=True)
class Step[S]:
    state: S
    cost: float
    """Cumulative cost up to and including this step."""
    timestamp: float
    held: bool = False
    """The previous pose repeated because no move could follow the event."""


@dataclass(frozen=True, eq=False)
class Beam[S]:
    """One lineage of hand states with its cumulative cost."""

    history: PChain[Step[S]]

    @staticmethod
    def seed(state: S, timestamp: float = 0.0) -> Beam[S]:
        return Beam(PChain.singleton(Step(state, 0.0, timestamp)))

    def last(self) -> Step[S]:
        step = self.history.last()
        if step is None:
            raise Impossible("beam without a seed")
        return step

    @property
    def cost(self) -> float:
        return self.last().cost

    def extend(
        self, state: S, delta: float, timestamp: float, held: bool = False
    ) -> Beam[S]:
        step = Step(state, self.cost + delta, timestamp, held)
        return Beam(self.history.snoc(step))

    def steps(self) -> List[Step[S]]:
        return self.history.list()

    def states(self) -> List[S]:
        return [s.state for s in self.steps()]

    def costs(self) -> List[float]:
        return [s.cost for s in self.steps()]

    def timestamps(self) -> List[float]:
        return [s.timestamp for s in self.steps()]

    def __len__(self) -> int:
        return self.history.size()


@dataclass(frozen=True)
class UnprocessableEvent:
    """An event no beam could follow."""

    timestamp: float
    content: Tuple[int, ...]
    """The pitches or strings of the event."""
    reason: str


@dataclass(frozen=True)
class Progress:
    hand: str
    processed: int
    total: int
    beams: int
    elapsed: float

    @property
    def events_per_second(self) -> float:
        return self.processed / self.elapsed if self.elapsed > 0 else 0.0


type ProgressCallback = Callable[[Progress], None]


def log_progress(progress: Progress) -> None:
    logging.info(
        "%s hand: %d/%d events, %d beams, %.1f events/s",
        progress.hand,
        progress.processed,
        progress.total,
        progress.beams,
        progress.events_per_second,
    )


class HandDriver[E, S, C](metaclass=ABCMeta):
    """What the pool needs to know about one hand."""

    name: str = "hand"

    @abstractmethod
    def candidates(self, event: E) -> Sequence[C]:
        """The targets the hand may move to for ``event``."""
        raise NotImplementedError()

    @abstractmethod
    def advance(self, state: S, candidate: C) -> Optional[Tuple[S, float]]:
        """Move ``state`` to ``candidate``, or None if the move is illegal."""
        raise NotImplementedError()

    @abstractmethod
    def timestamp(self, event: E) -> float:
        raise NotImplementedError()

    @abstractmethod
    def content(self, event: E) -> Tuple[int, ...]:
        """The raw event contents, for diagnostics."""
        raise NotImplementedError()


type _Ranked[S] = Flip[Entry[float, Beam[S]]]


class BeamPool[E, S, C]:
    """A bounded, cost-ordered set of beams advanced one event at a time."""

    def __init__(
        self,
        driver: HandDriver[E, S, C],
        seed: S,
        width: int,
        progress_interval: int = 10,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        if width < 1:
            raise ConfigError(f"beam width must be at least 1: {width}")
        if progress_interval < 1:
            raise ConfigError(f"progress interval must be at least 1: {progress_interval}")
        self._driver = driver
        self._width = width
        self._progress_interval = progress_interval
        self._on_progress = on_progress
        self._beams: PHeap[_Ranked[S]] = PHeap.singleton(_rank(Beam.seed(seed)))
        self._pre_beams: List[Beam[S]] = []
        self._unprocessable: List[UnprocessableEvent] = []

    @property
    def width(self) -> int:
        return self._width

    def size(self) -> int:
        return self._beams.size()

    def beams(self) -> List[Beam[S]]:
        return [ranked.value.value for ranked in self._beams.iter_unordered()]

    @property
    def unprocessable(self) -> List[UnprocessableEvent]:
        return list(self._unprocessable)

    def _push(self, beam: Beam[S]) -> None:
        if self._beams.size() >= self._width:
            worst = self._beams.peek_min()
            if worst is not None and beam.cost >= worst.value.key:
                return
        beams = self._beams.insert(_rank(beam))
        if beams.size() > self._width:
            evicted = beams.delete_min()
            if evicted is None:
                raise Impossible("eviction from an empty heap")
            beams = evicted
        self._beams = beams

    def process(self, event: E) -> bool:
        """Advance every beam by one event.

        Returns:
            True if some beam could follow the event, False if the pool
            fell back to holding the best previous pose.
        """
        self._pre_beams = self.beams()
        self._beams = PHeap.empty()
        timestamp = self._driver.timestamp(event)
        candidates = self._driver.candidates(event)
        for beam in self._pre_beams:
            state = beam.last().state
            for candidate in candidates:
                moved = self._driver.advance(state, candidate)
                if moved is not None:
                    new_state, delta = moved
                    self._push(beam.extend(new_state, delta, timestamp))
        if not self._beams.null() or not self._pre_beams:
            return True
        reason = "no legal transition" if candidates else "no candidate positions"
        self._freeze(event, timestamp, reason)
        return False

    def _freeze(self, event: E, timestamp: float, reason: str) -> None:
        best = min(self._pre_beams, key=lambda b: b.cost)
        record = UnprocessableEvent(timestamp, self._driver.content(event), reason)
        logging.warning(
            "%s hand: holding pose at %s for %s (%s, %d beams before)",
            self._driver.name,
            timestamp,
            record.content,
            reason,
            len(self._pre_beams),
        )
        self._unprocessable.append(record)
        frozen = best.extend(best.last().state, 0.0, timestamp, held=True)
        self._beams = PHeap.singleton(_rank(frozen))

    def run(self, events: Iterable[E]) -> None:
        """Process every event in order, reporting progress along the way."""
        pending = list(events)
        started = time.monotonic()
        for index, event in enumerate(pending, start=1):
            self.process(event)
            if index % self._progress_interval == 0 or index == len(pending):
                elapsed = time.monotonic() - started
                self._report(
                    Progress(self._driver.name, index, len(pending), self.size(), elapsed)
                )

    def _report(self, progress: Progress) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(progress)
        except Exception:
            logging.exception("progress callback failed")

    def best(self) -> Beam[S]:
        """The beam with the lowest cumulative cost."""
        beams = self.beams()
        if not beams:
            raise EmptyPoolError(f"{self._driver.name} hand search has no beams")
        return min(beams, key=lambda b: b.cost)


def _rank[S](beam: Beam[S]) -> Flip[Entry[float, Beam[S]]]:
    return Flip(Entry(beam.cost, beam))
