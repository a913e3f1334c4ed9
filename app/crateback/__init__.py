"""crateback - back up, restore and sync globally installed Cargo packages."""

__version__ = "0.3.0"
