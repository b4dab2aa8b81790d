from __future__ import annotations

from pathlib import Path

import pytest
from games.track.config import load_track_config
from games.track.env.env_core import TrackConfig


def test_repository_track_config_loads() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    config = load_track_config(repo_root / "games" / "track" / "configs" / "track.yml")

    assert len(config.centre_line) == 16
    assert config.centre_line[0] == (300.0, 0.0)
    assert config.sensor_count == 5
    assert config.max_steps == 1000


def test_load_track_config_sections(tmp_path: Path) -> None:
    track_yaml = tmp_path / "track.yml"
    track_yaml.write_text(
        """
half_width: 25
max_steps: 300
sensors:
  count: 3
  range: 80
physics:
  max_speed: 4
centre_line:
  - [0, 0]
  - [100, 0]
  - [50, 80]
""",
        encoding="utf-8",
    )

    config = load_track_config(track_yaml)

    assert config.half_width == 25.0
    assert config.max_steps == 300
    assert config.sensor_count == 3
    assert config.sensor_range == 80.0
    assert config.sensor_spread == TrackConfig().sensor_spread
    assert config.max_speed == 4.0
    assert config.centre_line == ((0.0, 0.0), (100.0, 0.0), (50.0, 80.0))


def test_empty_track_config_uses_defaults(tmp_path: Path) -> None:
    track_yaml = tmp_path / "track.yml"
    track_yaml.write_text("", encoding="utf-8")
    assert load_track_config(track_yaml) == TrackConfig()


@pytest.mark.parametrize(
    "content",
    [
        "centre_line: 5\n",
        "centre_line:\n  - [0, 0, 1]\n  - [1, 1]\n  - [2, 0]\n",
        "- just\n- a list\n",
    ],
)
def test_malformed_track_config_raises(tmp_path: Path, content: str) -> None:
    track_yaml = tmp_path / "track.yml"
    track_yaml.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_track_config(track_yaml)
