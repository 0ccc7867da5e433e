import json
import sys
from pathlib import Path

import pytest

from fretdance.base import ConfigError
from fretdance.main import (
    build_config,
    is_midi_path,
    load_json_events,
    main,
    make_parser,
    run,
)
from fretdance.notes import TuningPreset, preset_tuning


def _write_events(path: Path) -> str:
    events = [{"notes": [64], "realTick": 0}, {"notes": [67], "realTick": 480}]
    path.write_text(json.dumps(events))
    return str(path)


def test_build_config_from_tuning() -> None:
    args = make_parser().parse_args(
        ["in.json", "--tuning", "e b G D", "--beam-width", "5", "--bass"]
    )
    config = build_config(args)
    assert config.instrument.tuning == (64, 59, 55, 50)
    assert config.search.beam_width == 5
    assert config.search.bass_mode
    assert not config.instrument.use_harmonics


def test_build_config_from_preset() -> None:
    args = make_parser().parse_args(["in.json", "--preset", "standardbass", "--harmonics"])
    config = build_config(args)
    assert config.instrument.tuning == preset_tuning(TuningPreset.StandardBass)
    assert config.instrument.use_harmonics


def test_build_config_rejects() -> None:
    parser = make_parser()
    with pytest.raises(ConfigError):
        build_config(parser.parse_args(["in.json", "--preset", "Banjo"]))
    with pytest.raises(ConfigError):
        build_config(parser.parse_args(["in.json", "--beam-width", "0"]))


def test_is_midi_path() -> None:
    assert is_midi_path("song.mid")
    assert is_midi_path("SONG.MIDI")
    assert not is_midi_path("song.json")


def test_run_writes_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write_events(tmp_path / "events.json")
    output = tmp_path / "hands.json"
    args = make_parser().parse_args([source, "--output", str(output), "--show-hands"])
    run(args)
    data = json.loads(output.read_text())
    assert [f["realTick"] for f in data["leftHand"]] == [0.0, 480.0]
    assert [f["realTick"] for f in data["rightHand"]] == [0.0, 480.0]
    assert data["unprocessable"] == []
    assert data["leftCost"] >= 0.0
    assert capsys.readouterr().out.count("position") == 2


def test_main_reports_missing_input(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(sys, "argv", ["fretdance", str(tmp_path / "missing.json")])
    with pytest.raises(SystemExit) as info:
        main()
    assert info.value.code == 1


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '[{"notes": [64]}]',
        '[{"notes": ["x"], "realTick": 0}]',
        "42",
    ],
)
def test_malformed_events_rejected(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_json_events(str(path))


def test_main_reports_malformed_input(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "bad.json"
    path.write_text('[{"realTick": 0}]')
    monkeypatch.setattr(sys, "argv", ["fretdance", str(path)])
    with pytest.raises(SystemExit) as info:
        main()
    assert info.value.code == 1
