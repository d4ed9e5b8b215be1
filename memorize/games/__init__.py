"""
Games module - Built-in level sets.

Each level set is a named factory returning an ordered list of
LevelDefinitions ready for a GameController.
"""

from .levels import (
    ANIMAL_SYMBOLS,
    LEVEL_SETS,
    create_classic_levels,
    create_single_level,
    get_level_set,
    build_levels,
)

__all__ = [
    "ANIMAL_SYMBOLS",
    "LEVEL_SETS",
    "create_classic_levels",
    "create_single_level",
    "get_level_set",
    "build_levels",
]
