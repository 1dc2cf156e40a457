"""Real-time chat relay: named rooms and per-connection chat sessions."""

__version__ = "1.0.0"
