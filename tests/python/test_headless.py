import csv
import json

import pytest

from outbreak.app.headless import configure_logging, run_headless
from outbreak.sim.core.config import SimulationConfig


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def _small_config():
    return SimulationConfig(width=40, height=30)


def test_headless_log_header_and_rows(tmp_path):
    log_path = tmp_path / "basic.csv"
    world = run_headless(steps=3, map_seed="1", log_path=log_path, deterministic_log=True, config=_small_config())

    rows = _read_csv(log_path)
    assert len(rows) == 4
    assert rows[0] == ["tick", "population", "normal", "panicked", "sick", "zombies", "tick_ms"]
    assert [row[0] for row in rows[1:]] == ["1", "2", "3"]
    for row in rows[1:]:
        counts = [int(value) for value in row[2:6]]
        assert sum(counts) == int(row[1])
        assert row[-1] == "0.000"
    assert world.tick == 3


def test_deterministic_logs_match_for_same_seed(tmp_path):
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    run_headless(steps=20, map_seed="twin", log_path=first, deterministic_log=True, config=_small_config())
    run_headless(steps=20, map_seed="twin", log_path=second, deterministic_log=True, config=_small_config())

    assert first.read_text() == second.read_text()


def test_headless_summary_output(tmp_path):
    summary_path = tmp_path / "summary.json"
    world = run_headless(
        steps=4,
        map_seed="3",
        log_path=None,
        deterministic_log=True,
        summary_path=summary_path,
        config=_small_config(),
    )

    payload = json.loads(summary_path.read_text())
    assert payload["steps"] == 4
    assert payload["map_seed"] == "3"
    assert payload["width"] == 40
    assert payload["height"] == 30
    assert payload["components"] == sum(1 for _ in world.city.walk())
    assert payload["tick_ms"] == {"min": 0.0, "max": 0.0, "avg": 0.0}
    assert payload["peaks"]["zombies"]["value"] >= 1
    assert payload["final"]["population"] == len(world.agents)
    assert payload["final"]["zombies"] == world.metrics.zombies


def test_headless_writes_final_frame(tmp_path):
    frame_path = tmp_path / "final.png"

    run_headless(steps=2, map_seed="png", log_path=None, frame_path=frame_path, scale=2, config=_small_config())

    assert frame_path.read_bytes()[:4] == b"\x89PNG"


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("chatty")
