"""
Game State - Data definitions for the matching game.

Design principles:
- GameSession is the aggregate root; only GameController writes it
- Snapshots are frozen copies handed to renderers
- Hidden symbols never leave the engine through a snapshot
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidLevelConfigError


class PhaseKind(Enum):
    """High-level game phases."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    LEVEL_CLEARED = "level_cleared"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Phase:
    """
    Tagged phase variant.

    `level` is set for PLAYING and LEVEL_CLEARED and is None otherwise.
    """
    kind: PhaseKind
    level: int | None = None

    @classmethod
    def not_started(cls) -> Phase:
        return cls(PhaseKind.NOT_STARTED)

    @classmethod
    def playing(cls, level: int) -> Phase:
        return cls(PhaseKind.PLAYING, level)

    @classmethod
    def level_cleared(cls, level: int) -> Phase:
        return cls(PhaseKind.LEVEL_CLEARED, level)

    @classmethod
    def completed(cls) -> Phase:
        return cls(PhaseKind.COMPLETED)

    @property
    def is_playing(self) -> bool:
        return self.kind is PhaseKind.PLAYING

    def __str__(self) -> str:
        if self.level is None:
            return self.kind.value
        return f"{self.kind.value}({self.level})"


@dataclass
class Card:
    """
    A card on the board.

    `id` is the card's position on the board. `matched` only ever goes
    from False to True; a new board is generated instead of resetting it.
    """
    id: int
    symbol: str
    matched: bool = False


@dataclass(frozen=True)
class LevelDefinition:
    """
    One level of the game.

    The first `pair_count` entries of `symbols` are used, in order.
    """
    level_number: int
    pair_count: int
    symbols: tuple[str, ...]

    @property
    def card_count(self) -> int:
        return self.pair_count * 2

    def validate(self) -> None:
        """Raise InvalidLevelConfigError if this level cannot be played."""
        if self.level_number < 1:
            raise InvalidLevelConfigError(
                f"Level number must be >= 1, got {self.level_number}"
            )
        if self.pair_count < 1:
            raise InvalidLevelConfigError(
                f"Level {self.level_number}: pair_count must be >= 1, got {self.pair_count}"
            )
        if len(self.symbols) < self.pair_count:
            raise InvalidLevelConfigError(
                f"Level {self.level_number}: {len(self.symbols)} symbols "
                f"cannot fill {self.pair_count} pairs"
            )
        if len(set(self.symbols)) != len(self.symbols):
            raise InvalidLevelConfigError(
                f"Level {self.level_number}: symbols must be distinct"
            )


def validate_levels(levels: list[LevelDefinition] | tuple[LevelDefinition, ...]) -> tuple[LevelDefinition, ...]:
    """
    Check a level list and return it as a tuple.

    Levels must be numbered 1..n in order.
    """
    levels = tuple(levels)
    if not levels:
        raise InvalidLevelConfigError("At least one level definition is required")
    for position, level in enumerate(levels, start=1):
        level.validate()
        if level.level_number != position:
            raise InvalidLevelConfigError(
                f"Level at position {position} is numbered {level.level_number}"
            )
    return levels


@dataclass
class GameSession:
    """
    Complete mutable game state.

    `generation` changes whenever a new board is dealt, so deferred
    callbacks can tell whether they still apply.
    """
    phase: Phase = field(default_factory=Phase.not_started)
    current_level_index: int = 0
    board: list[Card] = field(default_factory=list)
    pending_selection: list[int] = field(default_factory=list)
    input_locked: bool = False
    generation: int = 0

    @property
    def all_matched(self) -> bool:
        return bool(self.board) and all(card.matched for card in self.board)


@dataclass(frozen=True)
class CardView:
    """What a renderer may know about one card."""
    id: int
    symbol: str | None
    face_up: bool
    matched: bool


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a GameSession."""
    phase: Phase
    level_number: int | None
    level_count: int
    cards: tuple[CardView, ...]
    pending_selection: tuple[int, ...]
    input_locked: bool

    @property
    def matched_count(self) -> int:
        return sum(1 for card in self.cards if card.matched)

    @classmethod
    def of(cls, session: GameSession, level_count: int) -> Snapshot:
        """Build a snapshot, withholding symbols of face-down cards."""
        pending = tuple(session.pending_selection)
        cards = []
        for card in session.board:
            face_up = card.matched or card.id in pending
            cards.append(CardView(
                id=card.id,
                symbol=card.symbol if face_up else None,
                face_up=face_up,
                matched=card.matched,
            ))
        level_number = None
        if session.phase.kind is not PhaseKind.NOT_STARTED:
            level_number = session.current_level_index + 1
        return cls(
            phase=session.phase,
            level_number=level_number,
            level_count=level_count,
            cards=tuple(cards),
            pending_selection=pending,
            input_locked=session.input_locked,
        )
