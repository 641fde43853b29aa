"""prols: rank project files by configurable rules and scores."""

__version__ = "0.1.0"
