"""Script-to-video storyboard generator."""

__version__ = "0.1.0"
