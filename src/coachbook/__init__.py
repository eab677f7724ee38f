"""coachbook: trainer availability and lesson booking rules."""

__version__ = "0.1.0"
