"""Surgical case workflow engine: state machine, checklist gates, operative timeline, day board."""

__version__ = "0.1.0"
