"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a game:
- Created when a client asks for a game
- Holds the GameController for that game
- Destroyed when the client ends it or it goes stale

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session

__all__ = [
    "SessionManager",
    "Session",
]
