"""Theme CSS variable engine for white-label trading front-ends."""

__version__ = "0.1.0"
