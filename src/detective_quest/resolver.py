"""
Case Resolver - Runs one exploration session and judges the accusation.

Session flow:
    EXPLORING -> DEAD_END / STOPPED_BY_PLAYER -> JUDGING -> DONE

While exploring, every room visited gives up its clue into the ledger.
Exploration ends at a dead end or when the detective stops. Judging lists
the notebook in alphabetical order and scores the accusation: each collected
clue that the clue index ties to the accused counts as one piece of
evidence, and two or more pieces convict.

All console I/O lives in main; the resolver only takes already-read input
and returns structured results.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from detective_quest.clue_index import ClueIndex
from detective_quest.clue_ledger import ClueEntry, ClueLedger
from detective_quest.mansion import Direction, Mansion, bounded_text

logger = logging.getLogger(__name__)


# Evidence needed to convict the accused
CONVICTION_THRESHOLD = 2

# Accusation buffer size (terminator included)
MAX_ACCUSATION_LENGTH = 50


class SessionState(Enum):
    EXPLORING = "exploring"
    DEAD_END = "dead_end"
    STOPPED_BY_PLAYER = "stopped_by_player"
    JUDGING = "judging"
    DONE = "done"


class Command(Enum):
    """Player commands during exploration."""
    LEFT = "e"
    RIGHT = "d"
    STOP = "s"


class MoveOutcome(Enum):
    MOVED = "moved"
    NO_PATH = "no_path"
    STOPPED = "stopped"


class Outcome(Enum):
    CONVICTED = "conclusive"
    ESCAPED = "insufficient"
    UNSOLVED = "unsolved"


COMMAND_DIRECTIONS = {
    Command.LEFT: Direction.LEFT,
    Command.RIGHT: Direction.RIGHT,
}


def parse_command(raw: str) -> Optional[Command]:
    """
    Read a command from a line of input.

    Surrounding whitespace is ignored and only the first character counts,
    so "e" and "  esquerda" both mean left.

    Returns:
        The command, or None if the input is not a known command
    """
    text = raw.strip()
    if not text:
        return None
    try:
        return Command(text[0])
    except ValueError:
        return None


@dataclass
class RoomReport:
    """What the detective sees on entering a room."""
    name: str
    clue: Optional[str] = None
    exits: dict[Direction, str] = field(default_factory=dict)
    dead_end: bool = False


@dataclass
class Verdict:
    """Result of the judging phase."""
    outcome: Outcome
    accused: Optional[str] = None
    score: int = 0
    clues: list[str] = field(default_factory=list)
    tally: dict[str, int] = field(default_factory=dict)

    @property
    def message(self) -> str:
        if self.outcome == Outcome.UNSOLVED:
            return "No clues were collected. The case remains unsolved."
        if self.outcome == Outcome.CONVICTED:
            return (f"Conclusive evidence! {self.score} clues point to {self.accused}. "
                    f"The suspect is convicted.")
        return (f"Insufficient evidence: only {self.score} clue(s) point to "
                f"{self.accused or 'nobody'}. The suspect escapes.")


def _count_matches(node: Optional[ClueEntry], index: ClueIndex, accused: str) -> int:
    if node is None:
        return 0
    match = 1 if index.lookup(node.text) == accused else 0
    return match + _count_matches(node.left, index, accused) + _count_matches(node.right, index, accused)


def count_matches(ledger: ClueLedger, index: ClueIndex, accused: str) -> int:
    """Count collected clues that the index ties to the accused (exact, case-sensitive)."""
    return _count_matches(ledger.root, index, accused)


def tally_suspects(ledger: ClueLedger, index: ClueIndex) -> dict[str, int]:
    """Evidence count per suspect over the collected clues. Unknown clues are skipped."""
    tally: dict[str, int] = {}
    for clue in ledger.in_order():
        suspect = index.lookup(clue)
        if suspect is not None:
            tally[suspect] = tally.get(suspect, 0) + 1
    return tally


def judge(score: int) -> Outcome:
    """Decide the outcome of an accusation from its evidence score."""
    return Outcome.CONVICTED if score >= CONVICTION_THRESHOLD else Outcome.ESCAPED


class CaseResolver:
    """State machine for one exploration session."""

    def __init__(self, mansion: Mansion, index: ClueIndex, ledger: Optional[ClueLedger] = None):
        self.mansion = mansion
        self.index = index
        self.ledger = ledger if ledger is not None else ClueLedger()
        self.state = SessionState.EXPLORING
        self.verdict: Optional[Verdict] = None

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            expected = ", ".join(s.name for s in states)
            raise ValueError(f"Session is {self.state.name}, expected {expected}")

    def explore(self) -> RoomReport:
        """
        Look around the current room.

        Picks up the room's clue (if still there) into the ledger and lists
        the exits. Arriving at a dead end finishes the exploration.
        """
        self._require(SessionState.EXPLORING)
        room = self.mansion.current_room

        clue = self.mansion.collect_clue_if_any(room)
        if clue is not None:
            self.ledger.insert(clue)

        exits = {}
        for direction in Direction:
            neighbour = self.mansion.step(room, direction)
            if neighbour is not None:
                exits[direction] = neighbour.name

        report = RoomReport(name=room.name, clue=clue, exits=exits, dead_end=room.is_dead_end())
        if report.dead_end:
            self.state = SessionState.DEAD_END
            logger.debug(f"Dead end reached at {room.name}")
        return report

    def choose_direction(self, command: Command) -> MoveOutcome:
        """
        Apply the player's command.

        Returns:
            MOVED if the detective entered a new room, NO_PATH if nothing
            lies that way (the detective stays put), STOPPED if the player
            ended the exploration
        """
        self._require(SessionState.EXPLORING)

        if command == Command.STOP:
            self.state = SessionState.STOPPED_BY_PLAYER
            logger.debug("Exploration stopped by player")
            return MoveOutcome.STOPPED

        neighbour = self.mansion.step(self.mansion.current_room, COMMAND_DIRECTIONS[command])
        if neighbour is None:
            return MoveOutcome.NO_PATH

        self.mansion.move_to(neighbour)
        return MoveOutcome.MOVED

    def begin_judging(self) -> list[str]:
        """
        Close the exploration and open the notebook.

        Returns:
            The collected clues in alphabetical order. When there are none,
            the session is finished right away with an unsolved verdict.
        """
        self._require(SessionState.DEAD_END, SessionState.STOPPED_BY_PLAYER)
        self.state = SessionState.JUDGING

        clues = list(self.ledger.in_order())
        if not clues:
            self.verdict = Verdict(outcome=Outcome.UNSOLVED)
            self.state = SessionState.DONE
        return clues

    def resolve_accusation(self, accused: str) -> Verdict:
        """
        Score an accusation against the collected clues.

        Any name is accepted; a name no clue points to simply scores zero.
        """
        self._require(SessionState.JUDGING)

        accused = bounded_text(accused.strip("\r\n"), MAX_ACCUSATION_LENGTH, "Accusation")
        score = count_matches(self.ledger, self.index, accused)
        self.verdict = Verdict(
            outcome=judge(score),
            accused=accused,
            score=score,
            clues=list(self.ledger.in_order()),
            tally=tally_suspects(self.ledger, self.index),
        )
        self.state = SessionState.DONE
        logger.debug(f"Accused {accused!r}: score {score}, {self.verdict.outcome.name}")
        return self.verdict

    @property
    def is_done(self) -> bool:
        return self.state == SessionState.DONE
