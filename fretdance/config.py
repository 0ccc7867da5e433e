"""Configuration for the fingering search.

All configuration is frozen; derive variants with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from fretdance import constants
from fretdance.base import ConfigError


@dataclass(frozen=True)
class InstrumentConfig:
    tuning: Tuple[int, ...]
    """Open-string pitches, highest-pitched string first."""
    use_harmonics: bool = False
    """Offer natural harmonics as alternative positions."""
    string_spacing: float = constants.STRING_SPACING
    full_string: float = constants.FULL_STRING

    def validate(self) -> None:
        if not self.tuning:
            raise ConfigError("instrument needs at least one string")
        if self.string_spacing <= 0:
            raise ConfigError(f"string spacing must be positive: {self.string_spacing}")
        if self.full_string <= 0:
            raise ConfigError(f"scale length must be positive: {self.full_string}")


@dataclass(frozen=True)
class CostConfig:
    lift_off_penalty: float = constants.LIFT_OFF_PENALTY
    """Charged whenever a fretting finger lifts off the strings."""
    repeat_penalty: float = constants.REPEAT_PENALTY
    """Unit charge for a plucking finger reused on consecutive events."""

    def validate(self) -> None:
        if self.lift_off_penalty < 0 or self.repeat_penalty < 0:
            raise ConfigError(f"penalties must be non-negative: {self}")


@dataclass(frozen=True)
class SearchConfig:
    beam_width: int = constants.DEFAULT_BEAM_WIDTH
    """Number of beams kept after each event."""
    fold_octaves: bool = True
    """Move out-of-range pitches by octaves instead of dropping the event."""
    bass_mode: bool = False
    """Allow i/m/a to cross each other when plucking."""
    progress_interval: int = constants.DEFAULT_PROGRESS_INTERVAL
    """Report progress every this many events."""

    def validate(self) -> None:
        if self.beam_width < 1:
            raise ConfigError(f"beam width must be at least 1: {self.beam_width}")
        if self.progress_interval < 1:
            raise ConfigError(
                f"progress interval must be at least 1: {self.progress_interval}"
            )


@dataclass(frozen=True)
class Config:
    instrument: InstrumentConfig
    costs: CostConfig
    search: SearchConfig

    def validate(self) -> None:
        self.instrument.validate()
        self.costs.validate()
        self.search.validate()


def init_config(tuning: Tuple[int, ...], use_harmonics: bool = False) -> Config:
    """Build a validated configuration with default costs and search settings.

    Args:
        tuning: Open-string pitches, highest-pitched string first.
        use_harmonics: Whether natural harmonics are candidate positions.

    Returns:
        The configuration.
    """
    config = Config(
        instrument=InstrumentConfig(tuning=tuning, use_harmonics=use_harmonics),
        costs=CostConfig(),
        search=SearchConfig(),
    )
    config.validate()
    return config
