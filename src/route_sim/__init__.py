"""Route motion simulator: interpolated position streams along waypoint routes."""

__version__ = "0.1.0"
