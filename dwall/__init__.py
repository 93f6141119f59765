"""dwall - context-aware wallpaper rotation for hyprpaper."""

__version__ = "0.1.0"
