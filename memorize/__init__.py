"""
Memorize - Card Matching Game Engine

A small turn-based memory game: reveal two cards at a time, remember
where you saw each symbol, and clear every board across increasingly
large levels. The engine provides:
- A GameController state machine (reveal, match, timed flip-back, levels)
- Built-in level sets
- Ephemeral sessions behind a REST/WebSocket API
- A terminal front end
"""

__version__ = "0.1.0"
