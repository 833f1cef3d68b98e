"""Sort settings presets stored as JSON project files."""

import json
from dataclasses import dataclass
from typing import Optional

from pixel_sorter import Direction, Mode

PROJECT_VERSION = "1.0"


@dataclass
class SortSettings:
    """Settings for one pixel sorting run. None means "not set"."""

    input_file: Optional[str] = None
    mode: Optional[Mode] = None
    direction: Optional[Direction] = None
    threads: Optional[int] = None


def load_project(filename):
    """Load sort settings from a project file."""
    with open(filename, "r") as f:
        project_data = json.load(f)

    if not isinstance(project_data, dict):
        raise ValueError(f"Project file {filename} must contain a JSON object")

    settings = SortSettings(input_file=project_data.get("input_file"))

    # Load sorting settings
    if "sorting" in project_data:
        s = project_data["sorting"]
        if not isinstance(s, dict):
            raise ValueError("Project \"sorting\" section must be a JSON object")
        if s.get("mode") is not None:
            settings.mode = Mode.parse(s["mode"])
        if s.get("direction") is not None:
            settings.direction = Direction.parse(s["direction"])
        threads = s.get("threads")
        if threads is not None:
            if isinstance(threads, bool) or not isinstance(threads, int) or threads < 0:
                raise ValueError(f"Invalid thread count in project file: {threads!r}")
            settings.threads = threads

    return settings


def save_project(filename, settings):
    """Save sort settings to a project file."""
    project_data = {
        "version": PROJECT_VERSION,
        "input_file": settings.input_file,
        "sorting": {
            "mode": settings.mode.value if settings.mode else None,
            "direction": settings.direction.value if settings.direction else None,
            "threads": settings.threads,
        },
    }

    with open(filename, "w") as f:
        json.dump(project_data, f, indent=2)
