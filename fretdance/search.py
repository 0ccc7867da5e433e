"""End-to-end fingering search.

The fretting hand is searched first over the pitch events. The strings
its best sequence sounds at each tick then drive the plucking-hand
search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, override

from fretdance import notes
from fretdance.chord import chords_for_notes
from fretdance.config import Config, CostConfig
from fretdance.fingering import HandPosition, hand_positions_for_chords
from fretdance.instrument import Instrument
from fretdance.left_hand import LeftHand, generate_next_hand, seed_left_hand
from fretdance.pool import (
    Beam,
    BeamPool,
    HandDriver,
    ProgressCallback,
    UnprocessableEvent,
    log_progress,
)
from fretdance.right_hand import (
    RightHand,
    follow,
    generate_right_hands,
    right_hand_cost,
    seed_right_hand,
)


@dataclass(frozen=True)
class NoteEvent:
    """Pitches starting together."""

    pitches: Tuple[int, ...]
    timestamp: float


@dataclass(frozen=True)
class StringEvent:
    """Strings plucked together."""

    strings: Tuple[int, ...]
    timestamp: float


class LeftHandDriver(HandDriver[NoteEvent, LeftHand, HandPosition]):
    name = "left"

    def __init__(self, instrument: Instrument, costs: CostConfig, fold_octaves: bool) -> None:
        self._instrument = instrument
        self._costs = costs
        self._fold_octaves = fold_octaves

    def pitches(self, event: NoteEvent) -> List[int]:
        if not self._fold_octaves:
            return sorted(set(event.pitches))
        folded = notes.fold_notes(event.pitches, self._instrument.tuning)
        return notes.thin_notes(folded, self._instrument.num_strings)

    @override
    def candidates(self, event: NoteEvent) -> List[HandPosition]:
        pitches = self.pitches(event)
        if not pitches:
            return []
        return hand_positions_for_chords(chords_for_notes(self._instrument, pitches))

    @override
    def advance(
        self, state: LeftHand, candidate: HandPosition
    ) -> Optional[Tuple[LeftHand, float]]:
        return generate_next_hand(self._instrument, self._costs, state, candidate)

    @override
    def timestamp(self, event: NoteEvent) -> float:
        return event.timestamp

    @override
    def content(self, event: NoteEvent) -> Tuple[int, ...]:
        return event.pitches


class RightHandDriver(HandDriver[StringEvent, RightHand, RightHand]):
    name = "right"

    def __init__(self, instrument: Instrument, costs: CostConfig, bass: bool) -> None:
        self._instrument = instrument
        self._costs = costs
        self._bass = bass

    @override
    def candidates(self, event: StringEvent) -> List[RightHand]:
        return generate_right_hands(self._instrument, event.strings, self._bass)

    @override
    def advance(
        self, state: RightHand, candidate: RightHand
    ) -> Optional[Tuple[RightHand, float]]:
        hand = follow(state, candidate)
        return (hand, right_hand_cost(self._costs, state, hand))

    @override
    def timestamp(self, event: StringEvent) -> float:
        return event.timestamp

    @override
    def content(self, event: StringEvent) -> Tuple[int, ...]:
        return event.strings


def string_events(beam: Beam[LeftHand]) -> List[StringEvent]:
    """The strings sounded at each tick of a fretting sequence.

    The seed is skipped, as are ticks that sound nothing new and ticks
    where the hand only held its previous pose.
    """
    events = []
    for step in beam.steps()[1:]:
        if step.held:
            continue
        strings = step.state.touched_strings()
        if strings:
            events.append(StringEvent(tuple(strings), step.timestamp))
    return events


@dataclass(frozen=True)
class SearchResult:
    left: Beam[LeftHand]
    right: Beam[RightHand]
    unprocessable: Tuple[UnprocessableEvent, ...]

    @property
    def left_cost(self) -> float:
        return self.left.cost

    @property
    def right_cost(self) -> float:
        return self.right.cost


def search_left_hand(
    config: Config,
    events: Sequence[NoteEvent],
    on_progress: Optional[ProgressCallback] = log_progress,
) -> BeamPool[NoteEvent, LeftHand, HandPosition]:
    instrument = Instrument.from_config(config.instrument)
    driver = LeftHandDriver(instrument, config.costs, config.search.fold_octaves)
    pool = BeamPool(
        driver,
        seed_left_hand(instrument),
        config.search.beam_width,
        config.search.progress_interval,
        on_progress,
    )
    pool.run(events)
    return pool


def search_right_hand(
    config: Config,
    events: Sequence[StringEvent],
    on_progress: Optional[ProgressCallback] = log_progress,
) -> BeamPool[StringEvent, RightHand, RightHand]:
    instrument = Instrument.from_config(config.instrument)
    driver = RightHandDriver(instrument, config.costs, config.search.bass_mode)
    pool = BeamPool(
        driver,
        seed_right_hand(instrument),
        config.search.beam_width,
        config.search.progress_interval,
        on_progress,
    )
    pool.run(events)
    return pool


def search(
    config: Config,
    events: Sequence[NoteEvent],
    on_progress: Optional[ProgressCallback] = log_progress,
) -> SearchResult:
    """Find low-cost fretting and plucking sequences for ``events``.

    Args:
        config: Instrument, cost and search settings.
        events: Pitch events in time order.
        on_progress: Called every few events with throughput figures.

    Returns:
        The best beam for each hand and every event either hand had to
        hold through.
    """
    config.validate()
    ordered = sorted(events, key=lambda e: e.timestamp)
    logging.info("searching fretting hand over %d events", len(ordered))
    left_pool = search_left_hand(config, ordered, on_progress)
    left = left_pool.best()
    logging.info("fretting hand cost %.3f", left.cost)
    plucks = string_events(left)
    logging.info("searching plucking hand over %d events", len(plucks))
    right_pool = search_right_hand(config, plucks, on_progress)
    right = right_pool.best()
    logging.info("plucking hand cost %.3f", right.cost)
    unprocessable = tuple(left_pool.unprocessable + right_pool.unprocessable)
    if unprocessable:
        logging.warning("%d events could not be played", len(unprocessable))
    return SearchResult(left, right, unprocessable)
