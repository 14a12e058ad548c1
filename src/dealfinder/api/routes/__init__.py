"""Route group exports."""

from . import deals, establishments, health

__all__ = ["deals", "establishments", "health"]
