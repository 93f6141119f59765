from __future__ import annotations

from pathlib import Path

import pytest

from dwall.config import CONFIG_TEMPLATE, Config, create_default_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Config.load(tmp_path / "missing.yaml")


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    config = Config.load(_write(tmp_path, ""))
    assert config.network_backend == "nmcli"
    assert config.check_interval == 60
    assert config.database.name == "dwall.db"


def test_full_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DWALL_TEST_DIR", str(tmp_path))
    config = Config.load(_write(tmp_path, """
storage:
  database: $DWALL_TEST_DIR/rules.db
  image_dir: $DWALL_TEST_DIR/img
network:
  backend: iwgetid
  interface: wlan0
settings:
  check_interval: 30
  monitor: DP-1
  timezone: Europe/London
  thumbnail_size: [128, 96]
"""))

    assert config.database == tmp_path / "rules.db"
    assert config.image_dir == tmp_path / "img"
    assert config.network_backend == "iwgetid"
    assert config.interface == "wlan0"
    assert config.check_interval == 30
    assert config.monitor == "DP-1"
    assert config.timezone == "Europe/London"
    assert config.thumbnail_size == (128, 96)


@pytest.mark.parametrize(
    "text",
    [
        "network:\n  backend: wpa_cli\n",
        "settings:\n  check_interval: 5\n",
        "settings:\n  check_interval: 7200\n",
        "settings:\n  check_interval: soon\n",
        "settings:\n  timezone: Mars/Olympus\n",
        "settings:\n  thumbnail_size: [0, 10]\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        Config.load(_write(tmp_path, text))


def test_template_is_loadable(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.yaml"
    create_default_config(path)

    assert path.read_text() == CONFIG_TEMPLATE
    assert Config.load(path).check_interval == 60
