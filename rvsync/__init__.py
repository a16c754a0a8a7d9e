"""Version solving, install planning and library linking for R package projects."""

__version__ = "0.8.0"