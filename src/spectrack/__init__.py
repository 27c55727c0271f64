"""SPECTRACK — checklist task tracking with dependency and completion checks."""

__version__ = "1.0.0"
