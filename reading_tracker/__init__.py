"""Reading Tracker - content relevance scoring for a personal reading log."""

__version__ = "0.1.0"
