"""Configuration loading and validation."""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Tuple
import pytz

from dwall.network import BACKENDS

logger = logging.getLogger(__name__)


def _expand(path_str: str) -> Path:
    return Path(os.path.expanduser(os.path.expandvars(path_str)))


def get_default_data_dir() -> Path:
    """Get the default data directory (database and imported images)."""
    xdg_data_home = os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
    return Path(xdg_data_home) / 'dwall'


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    xdg_config_home = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
    return Path(xdg_config_home) / 'dwall' / 'config.yaml'


@dataclass
class Config:
    """dwall configuration."""

    database: Path = field(default_factory=lambda: get_default_data_dir() / 'dwall.db')
    image_dir: Path = field(default_factory=lambda: get_default_data_dir() / 'images')
    network_backend: str = "nmcli"
    interface: str = ""
    check_interval: int = 60
    monitor: str = ""
    timezone: str = ""
    thumbnail_size: Tuple[int, int] = (256, 256)

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """
        Load and validate configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")

        defaults = cls()

        # Storage locations
        storage = data.get('storage') or {}
        database = storage.get('database')
        image_dir = storage.get('image_dir')

        # Network lookup
        network = data.get('network') or {}
        backend = network.get('backend', defaults.network_backend)
        if backend not in BACKENDS:
            raise ValueError(
                f"Invalid network backend: {backend}. Must be one of: {', '.join(BACKENDS)}"
            )
        interface = network.get('interface', '') or ''

        # Optional settings
        settings = data.get('settings') or {}

        check_interval = settings.get('check_interval', defaults.check_interval)
        if not isinstance(check_interval, int) or isinstance(check_interval, bool):
            raise ValueError(f"check_interval must be an integer, got: {check_interval!r}")
        if check_interval < 10:
            raise ValueError(f"check_interval must be at least 10 seconds, got: {check_interval}")
        if check_interval > 3600:
            raise ValueError(
                f"check_interval cannot exceed 3600 seconds (1 hour), got: {check_interval}"
            )

        timezone = settings.get('timezone', '') or ''
        if timezone and timezone not in pytz.all_timezones:
            raise ValueError(
                f"Invalid timezone: {timezone}. "
                f"Must be a valid IANA timezone (e.g., 'US/Pacific', 'Europe/London')"
            )

        thumbnail_size = settings.get('thumbnail_size', list(defaults.thumbnail_size))
        if (
            not isinstance(thumbnail_size, (list, tuple))
            or len(thumbnail_size) != 2
            or not all(isinstance(v, int) and v > 0 for v in thumbnail_size)
        ):
            raise ValueError(
                f"thumbnail_size must be two positive integers [width, height], got: {thumbnail_size}"
            )

        return cls(
            database=_expand(database) if database else defaults.database,
            image_dir=_expand(image_dir) if image_dir else defaults.image_dir,
            network_backend=backend,
            interface=interface,
            check_interval=check_interval,
            monitor=settings.get('monitor', '') or '',
            timezone=timezone,
            thumbnail_size=(thumbnail_size[0], thumbnail_size[1]),
        )


CONFIG_TEMPLATE = """# dwall configuration

storage:
  database: ~/.local/share/dwall/dwall.db   # Rule database
  image_dir: ~/.local/share/dwall/images    # Imported wallpaper images

network:
  backend: nmcli        # nmcli (NetworkManager) or iwgetid
  interface: ""         # Wireless interface (empty = any)

settings:
  check_interval: 60    # How often rules are re-evaluated (seconds)
  monitor: ""           # Monitor name (empty = all monitors)
  timezone: ""          # IANA timezone for time rules (empty = local time)
  thumbnail_size: [256, 256]
"""


def create_default_config(config_path: Path) -> None:
    """Write the configuration template to `config_path`."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(CONFIG_TEMPLATE)
    logger.info(f"Configuration template written to {config_path}")
