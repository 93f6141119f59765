"""Painting rule images through hyprpaper IPC."""

import logging
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence, Set

from dwall.images import ImageLibrary
from dwall.rules import Rule


logger = logging.getLogger(__name__)


class WallpaperManager:
    """Sets the wallpaper for the highest-priority active rule."""

    def __init__(self, monitor: str = ""):
        """
        Initialize wallpaper manager.

        Args:
            monitor: Monitor name (empty string = all monitors)
        """
        self.monitor = monitor
        self.current_wallpaper: Optional[Path] = None
        self.preloaded: Set[Path] = set()

    def _hyprctl(self, *args: str) -> bool:
        """
        Run a hyprpaper request through hyprctl.

        Returns:
            True if successful, False otherwise
        """
        cmd = ['hyprctl', 'hyprpaper', *args]
        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=5
            )
            return True
        except subprocess.CalledProcessError as e:
            error_msg = (e.stderr or "") + (e.stdout or "")
            lowered = error_msg.lower()
            if 'unknown' in lowered and 'request' in lowered:
                # hyprpaper 0.8.x rejects preload over IPC
                logger.debug(f"Request not supported (ignored): {args[0]}")
            else:
                logger.error(f"Command failed: {' '.join(cmd)}\n{error_msg}")
            return False
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out: {' '.join(cmd)}")
            return False
        except FileNotFoundError:
            logger.error("hyprctl not found; is Hyprland installed?")
            return False

    def is_hyprpaper_running(self) -> bool:
        """Check whether a hyprpaper process exists."""
        try:
            result = subprocess.run(
                ['pgrep', '-x', 'hyprpaper'],
                capture_output=True,
                timeout=2
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def wait_for_hyprpaper(self, max_wait: int = 30) -> bool:
        """
        Wait up to `max_wait` seconds for hyprpaper to start.

        Returns:
            True if hyprpaper is ready, False on timeout
        """
        logger.info("Waiting for hyprpaper to be ready...")
        for _ in range(max_wait):
            if self.is_hyprpaper_running():
                logger.info("Hyprpaper is ready")
                return True
            time.sleep(1)

        logger.error(f"Hyprpaper not ready after {max_wait} seconds")
        return False

    def set_wallpaper(self, path: Path) -> bool:
        """
        Show an image on the configured monitor.

        Args:
            path: Path to the image file

        Returns:
            True if successful, False otherwise
        """
        if not path.exists():
            logger.error(f"Wallpaper file not found: {path}")
            return False

        # Optional step, hyprpaper loads on demand when this fails
        if path not in self.preloaded and self._hyprctl('preload', str(path)):
            self.preloaded.add(path)

        if not self._hyprctl('wallpaper', f"{self.monitor},{path}"):
            logger.error(f"Failed to set wallpaper: {path.name}")
            return False

        previous = self.current_wallpaper
        self.current_wallpaper = path
        logger.info(f"Wallpaper changed to: {path.name}")

        if previous is not None and previous != path and previous in self.preloaded:
            if self._hyprctl('unload', str(previous)):
                self.preloaded.discard(previous)
        return True

    def apply(self, active: Sequence[Rule], library: ImageLibrary) -> Optional[Rule]:
        """
        Show the image of the first active rule.

        Nothing changes when no rule is active or the image is already shown.

        Args:
            active: Active rules in priority order
            library: Where rule images live

        Returns:
            The rule whose image is displayed, or None
        """
        if not active:
            logger.debug("No active rule, keeping current wallpaper")
            return None

        rule = active[0]
        if not rule.filename:
            logger.warning(f"Rule '{rule.name}' has no image")
            return None

        path = library.path_for(rule.filename)
        if path == self.current_wallpaper:
            logger.debug(f"Already showing: {rule.name}")
            return rule

        logger.info(f"Applying rule '{rule.name}' ({rule.mode.value} {rule.info})")
        return rule if self.set_wallpaper(path) else None
