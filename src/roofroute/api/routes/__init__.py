"""Route group exports."""

from . import clusters, geocoding, health

__all__ = ["clusters", "geocoding", "health"]
