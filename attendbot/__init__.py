"""attendbot - rule-based chat assistant for the smart attendance portals."""

__version__ = "0.1.0"
