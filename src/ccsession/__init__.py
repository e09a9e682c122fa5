"""Archive and resume AI work sessions as markdown summaries."""

__version__ = "0.1.0"
