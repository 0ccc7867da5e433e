import pytest

from fretdance.config import CostConfig, InstrumentConfig
from fretdance.instrument import Instrument
from fretdance.notes import TuningPreset, preset_tuning


@pytest.fixture
def guitar() -> Instrument:
    return Instrument.from_config(
        InstrumentConfig(preset_tuning(TuningPreset.StandardGuitar))
    )


@pytest.fixture
def bass() -> Instrument:
    return Instrument.from_config(
        InstrumentConfig(preset_tuning(TuningPreset.StandardBass))
    )


@pytest.fixture
def costs() -> CostConfig:
    return CostConfig()
