"""now-playing - scrolling MPRIS now-playing module for polybar."""

__version__ = "0.1.0"
