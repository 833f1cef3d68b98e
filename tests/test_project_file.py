import json

import pytest

from pixel_sorter import Direction, Mode
from project_file import SortSettings, load_project, save_project


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


def test_saved_project_loads_back(tmp_path):
    path = tmp_path / "preset.json"
    settings = SortSettings("in.png", Mode.DARK, Direction.ROWS_FIRST, 4)

    save_project(path, settings)

    assert load_project(path) == settings
    data = json.loads(path.read_text())
    assert data["version"] == "1.0"
    assert data["sorting"] == {"mode": "dark", "direction": "v", "threads": 4}


def test_missing_keys_stay_unset(tmp_path):
    path = write_json(tmp_path / "preset.json", {"version": "1.0"})
    assert load_project(path) == SortSettings()


def test_mode_is_case_insensitive(tmp_path):
    path = write_json(tmp_path / "preset.json", {"sorting": {"mode": "Bright"}})
    assert load_project(path).mode is Mode.BRIGHT


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"sorting": "white"},
        {"sorting": {"mode": "hue"}},
        {"sorting": {"direction": "x"}},
        {"sorting": {"threads": -1}},
        {"sorting": {"threads": "4"}},
    ],
)
def test_invalid_projects_raise_value_error(tmp_path, data):
    path = write_json(tmp_path / "preset.json", data)
    with pytest.raises(ValueError):
        load_project(path)


def test_malformed_json_raises_value_error(tmp_path):
    path = tmp_path / "preset.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        load_project(path)
