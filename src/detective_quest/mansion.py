"""
Mansion Map for Detective Quest

The mansion is a fixed binary tree of rooms rooted at the entrance hall.
From any room the detective may go left or right when a room lies that way.
A room without exits is a dead end and finishes the exploration.

Map rules:
- The layout is static and built once before play
- Every room has a unique, non-empty name
- A room holds at most one clue, picked up on the first visit only
- Rooms are released post-order (children before their parent)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)


# Text bounds (the original fixed-size buffers, terminator included)
MAX_ROOM_NAME_LENGTH = 50
MAX_CLUE_LENGTH = 100


class Direction(Enum):
    """Exits of a room, keyed by their console command."""
    LEFT = "e"   # esquerda
    RIGHT = "d"  # direita


# ============================================================================
# MANSION LAYOUT
# Nested description of the map: each room may name a left and right room.
#
#                     Hall de entrada
#                    /               \
#            Sala de Estar         Biblioteca
#            /           \                   \
#       Cozinha    Jardim de Inverno       Escritorio
#                   /
#            Sala de Musica
# ============================================================================

MANSION_LAYOUT = {
    "name": "Hall de entrada",
    "clue": "Uma bota suja de lama foi deixada perto da porta.",
    "left": {
        "name": "Sala de Estar",
        "clue": "Ha uma xicara de cha ainda morna sobre a mesa.",
        "left": {
            "name": "Cozinha",
            "clue": "Facas foram limpas recentemente.",
        },
        "right": {
            "name": "Jardim de Inverno",
            "clue": None,
            "left": {
                "name": "Sala de Musica",
                "clue": "Uma corda de piano esta arrebentada.",
            },
        },
    },
    "right": {
        "name": "Biblioteca",
        "clue": "Um livro sobre venenos esta fora do lugar.",
        "right": {
            "name": "Escritorio",
            "clue": "Uma carta amassada esta na lixeira.",
        },
    },
}


def bounded_text(text: str, limit: int, label: str = "text") -> str:
    """
    Truncate text so it fits a buffer of `limit` characters.

    The limit counts one position for a terminator, so at most limit - 1
    characters are kept (room names, clues and accusations each have their
    own fixed bound). Truncation is logged, never silent.
    """
    if len(text) >= limit:
        logger.warning(f"{label} longer than {limit - 1} characters was truncated: {text!r}")
        return text[:limit - 1]
    return text


@dataclass(eq=False)
class Room:
    """A room of the mansion (a node of the map tree)."""
    name: str
    clue: Optional[str] = None
    left: Optional["Room"] = None
    right: Optional["Room"] = None

    def is_dead_end(self) -> bool:
        """A room with no exits ends the exploration."""
        return self.left is None and self.right is None

    def child(self, direction: Direction) -> Optional["Room"]:
        return self.left if direction == Direction.LEFT else self.right

    def has_clue(self) -> bool:
        return bool(self.clue)


@dataclass(frozen=True)
class RoomView:
    """Read-only snapshot of a room."""
    name: str
    clue: Optional[str]


def create_room(name: str, clue: Optional[str] = None) -> Room:
    """
    Create a single room.

    Args:
        name: Room name (must not be empty)
        clue: Clue text found in the room, or None/"" for no clue

    Returns:
        The new room with no exits
    """
    if not name:
        raise ValueError("Room name must not be empty")
    name = bounded_text(name, MAX_ROOM_NAME_LENGTH, "Room name")
    if clue:
        clue = bounded_text(clue, MAX_CLUE_LENGTH, "Clue")
    else:
        clue = None
    return Room(name=name, clue=clue)


def _build_subtree(layout: Optional[dict], seen: set) -> Optional[Room]:
    if layout is None:
        return None

    room = create_room(layout["name"], layout.get("clue"))
    if room.name in seen:
        raise ValueError(f"Duplicate room name in layout: {room.name}")
    seen.add(room.name)

    room.left = _build_subtree(layout.get("left"), seen)
    room.right = _build_subtree(layout.get("right"), seen)
    return room


class Mansion:
    """The map tree plus the detective's current position in it."""

    def __init__(self, root: Room):
        self.root: Optional[Room] = root
        self.current_room: Optional[Room] = root
        self._torn_down = False

    @classmethod
    def build(cls, layout: dict = MANSION_LAYOUT) -> "Mansion":
        """Construct every room of a layout and wire up the exits."""
        root = _build_subtree(layout, set())
        if root is None:
            raise ValueError("Mansion layout must define a root room")
        mansion = cls(root)
        logger.debug(f"Built mansion with {len(mansion)} rooms, entrance: {root.name}")
        return mansion

    @staticmethod
    def describe(room: Room) -> RoomView:
        """Peek at a room without touching its clue."""
        return RoomView(name=room.name, clue=room.clue)

    @staticmethod
    def step(room: Room, direction: Direction) -> Optional[Room]:
        """
        Get the room that lies in a direction.

        Returns:
            The neighbouring room, or None when there is no path that way
        """
        return room.child(direction)

    @staticmethod
    def collect_clue_if_any(room: Room) -> Optional[str]:
        """
        Pick up the clue in a room.

        The clue is removed from the room, so a second call on the same
        room always returns None.
        """
        if not room.has_clue():
            return None
        clue = room.clue
        room.clue = None
        logger.debug(f"Clue picked up in {room.name}")
        return clue

    def move_to(self, room: Room) -> None:
        """Place the detective in a room."""
        self.current_room = room

    def rooms(self) -> Iterator[Room]:
        """Iterate every room, parent before children (left subtree first)."""
        stack = [self.root] if self.root is not None else []
        while stack:
            room = stack.pop()
            yield room
            if room.right is not None:
                stack.append(room.right)
            if room.left is not None:
                stack.append(room.left)

    def teardown(self, on_release: Optional[Callable[[Room], None]] = None) -> list[str]:
        """
        Release every room, children strictly before their parent.

        Args:
            on_release: Called once for each room as it is released

        Returns:
            Names of the released rooms in release order
        """
        if self._torn_down:
            raise RuntimeError("Mansion has already been torn down")

        released: list[str] = []

        def release(room: Optional[Room]) -> None:
            if room is None:
                return
            release(room.left)
            release(room.right)
            room.left = None
            room.right = None
            if on_release is not None:
                on_release(room)
            released.append(room.name)

        release(self.root)
        self.root = None
        self.current_room = None
        self._torn_down = True
        logger.debug(f"Released {len(released)} rooms")
        return released

    def __len__(self) -> int:
        return sum(1 for _ in self.rooms())


def build_mansion(layout: dict = MANSION_LAYOUT) -> Mansion:
    """Build the mansion (the shipped layout by default)."""
    return Mansion.build(layout)
