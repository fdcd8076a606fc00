from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from roomsearch.core.errors import RoomSearchValueError
from roomsearch.scenario.io import load_scenario, scenario_from_mapping


def _write(path: Path, payload: object) -> Path:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_load_scenario_accepts_mappings_and_shorthand(tmp_path: Path):
    path = _write(
        tmp_path / "dorm.yaml",
        {
            "name": "dorm",
            "num_students": 4,
            "iterations_per_worker": 500,
            "rooms": [{"capacity": 2, "id": "A"}, 2],
            "incompatibilities": [[0, 1], {"student1": 2, "student2": 3}],
        },
    )
    scenario = load_scenario(path)
    assert scenario.name == "dorm"
    assert scenario.iterations_per_worker == 500
    assert [room.capacity for room in scenario.rooms] == [2, 2]
    assert scenario.rooms[0].id == "A"
    assert [pair.as_pair() for pair in scenario.incompatibilities] == [(0, 1), (2, 3)]


def test_name_defaults_to_file_stem(tmp_path: Path):
    path = _write(tmp_path / "annex.yaml", {"num_students": 1, "rooms": [1]})
    scenario = load_scenario(path)
    assert scenario.name == "annex"
    assert scenario.incompatibilities == []


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_scenario(tmp_path / "missing.yaml")


def test_invalid_yaml_rejected(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("rooms: [1, 2\nnum_students: 3\n", encoding="utf-8")
    with pytest.raises(RoomSearchValueError, match="not valid YAML"):
        load_scenario(path)


def test_non_mapping_document_rejected(tmp_path: Path):
    path = _write(tmp_path / "list.yaml", [1, 2, 3])
    with pytest.raises(RoomSearchValueError):
        load_scenario(path)


@pytest.mark.parametrize(
    "payload",
    [
        {"num_students": 2},
        {"rooms": [1]},
        {"num_students": 2, "rooms": "big"},
        {"num_students": 2, "rooms": [1], "incompatibilities": [[0, 1, 2]]},
        {"num_students": 2, "rooms": [True]},
    ],
)
def test_malformed_layout_rejected(payload):
    with pytest.raises(RoomSearchValueError):
        scenario_from_mapping(payload)


def test_zero_rooms_rejected(tmp_path: Path):
    path = _write(tmp_path / "empty.yaml", {"num_students": 3, "rooms": []})
    with pytest.raises(ValidationError):
        load_scenario(path)
