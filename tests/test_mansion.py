"""
Tests for the Mansion Map
Covers the shipped layout, navigation, one-shot clue pickup and teardown.
"""

import logging

import pytest
from detective_quest.mansion import (
    Direction,
    Mansion,
    MANSION_LAYOUT,
    MAX_CLUE_LENGTH,
    MAX_ROOM_NAME_LENGTH,
    RoomView,
    build_mansion,
    create_room,
)


def _room(mansion, name):
    """Get a room of the mansion by name."""
    return next(room for room in mansion.rooms() if room.name == name)


class TestLayout:
    """Test the shipped mansion layout."""

    def test_room_count(self):
        """The mansion has seven rooms."""
        assert len(build_mansion()) == 7

    def test_entrance_is_root(self):
        """Exploration begins at the entrance hall."""
        mansion = build_mansion()
        assert mansion.root.name == "Hall de entrada"
        assert mansion.current_room is mansion.root

    def test_exits_are_wired(self):
        """Rooms connect as drawn on the map."""
        mansion = build_mansion()
        hall = mansion.root
        assert hall.left.name == "Sala de Estar"
        assert hall.right.name == "Biblioteca"
        assert hall.left.left.name == "Cozinha"
        assert hall.left.right.name == "Jardim de Inverno"
        assert hall.right.left is None
        assert hall.right.right.name == "Escritorio"
        assert hall.left.right.left.name == "Sala de Musica"
        assert hall.left.right.right is None

    def test_dead_ends(self):
        """Only rooms without exits are dead ends."""
        mansion = build_mansion()
        dead_ends = {room.name for room in mansion.rooms() if room.is_dead_end()}
        assert dead_ends == {"Cozinha", "Escritorio", "Sala de Musica"}

    def test_room_names_unique(self):
        names = [room.name for room in build_mansion().rooms()]
        assert len(names) == len(set(names))

    def test_winter_garden_has_no_clue(self):
        """One room starts empty."""
        garden = _room(build_mansion(), "Jardim de Inverno")
        assert garden.clue is None
        assert not garden.has_clue()

    def test_rooms_pre_order(self):
        """rooms() visits parents before children, left side first."""
        names = [room.name for room in build_mansion().rooms()]
        assert names == [
            "Hall de entrada", "Sala de Estar", "Cozinha", "Jardim de Inverno",
            "Sala de Musica", "Biblioteca", "Escritorio",
        ]

    def test_builds_are_independent(self):
        """Each build creates fresh rooms."""
        first = build_mansion()
        second = build_mansion()
        Mansion.collect_clue_if_any(first.root)
        assert second.root.has_clue()


class TestBuildValidation:
    """Test layout and room validation."""

    def test_empty_room_name_rejected(self):
        with pytest.raises(ValueError):
            create_room("")

    def test_duplicate_names_rejected(self):
        """Two rooms may not share a name."""
        layout = {"name": "A", "left": {"name": "A"}}
        with pytest.raises(ValueError):
            Mansion.build(layout)

    def test_empty_clue_means_no_clue(self):
        assert create_room("Sala", "").clue is None

    def test_long_name_truncated(self, caplog):
        """Names longer than the buffer are cut to fit, with a warning."""
        with caplog.at_level(logging.WARNING, logger="detective_quest.mansion"):
            room = create_room("N" * 80)
        assert room.name == "N" * (MAX_ROOM_NAME_LENGTH - 1)
        assert any(
            r.name == "detective_quest.mansion" and r.levelno == logging.WARNING
            and "Room name" in r.getMessage()
            for r in caplog.records
        )

    def test_long_clue_truncated(self, caplog):
        """Overlong clues are cut and the cut is logged."""
        with caplog.at_level(logging.WARNING, logger="detective_quest.mansion"):
            room = create_room("Sala", "c" * 200)
        assert len(room.clue) == MAX_CLUE_LENGTH - 1
        assert any(
            r.name == "detective_quest.mansion" and r.levelno == logging.WARNING
            and "Clue" in r.getMessage()
            for r in caplog.records
        )

    def test_short_text_not_logged(self, caplog):
        """Text within its bound is kept as is, without warnings."""
        with caplog.at_level(logging.WARNING, logger="detective_quest.mansion"):
            room = create_room("Sala", "Pista curta.")
        assert room.name == "Sala"
        assert room.clue == "Pista curta."
        assert caplog.records == []

    def test_single_room_layout(self):
        """A lone room is both root and dead end."""
        mansion = Mansion.build({"name": "Unico", "clue": "X"})
        assert len(mansion) == 1
        assert mansion.root.is_dead_end()


class TestNavigation:
    """Test moving between rooms."""

    def test_step_left_and_right(self):
        mansion = build_mansion()
        assert Mansion.step(mansion.root, Direction.LEFT).name == "Sala de Estar"
        assert Mansion.step(mansion.root, Direction.RIGHT).name == "Biblioteca"

    def test_step_toward_missing_room(self):
        """No path that way gives None."""
        library = _room(build_mansion(), "Biblioteca")
        assert Mansion.step(library, Direction.LEFT) is None

    def test_move_to(self):
        mansion = build_mansion()
        kitchen = _room(mansion, "Cozinha")
        mansion.move_to(kitchen)
        assert mansion.current_room is kitchen

    def test_describe_does_not_take_clue(self):
        """Describing a room leaves its clue in place."""
        mansion = build_mansion()
        view = Mansion.describe(mansion.root)
        assert view == RoomView("Hall de entrada", MANSION_LAYOUT["clue"])
        assert mansion.root.clue == MANSION_LAYOUT["clue"]

    def test_direction_commands(self):
        assert Direction("e") == Direction.LEFT
        assert Direction("d") == Direction.RIGHT


class TestCluePickup:
    """Test one-shot clue collection."""

    def test_clue_collected_once(self):
        """First pickup returns the clue, the second returns None."""
        mansion = build_mansion()
        for room in mansion.rooms():
            expected = room.clue
            assert Mansion.collect_clue_if_any(room) == expected
            assert Mansion.collect_clue_if_any(room) is None
            assert room.clue is None

    def test_room_without_clue(self):
        garden = _room(build_mansion(), "Jardim de Inverno")
        assert Mansion.collect_clue_if_any(garden) is None

    def test_collected_text_is_independent(self):
        """The returned clue survives the room being cleared and released."""
        mansion = build_mansion()
        clue = Mansion.collect_clue_if_any(mansion.root)
        mansion.teardown()
        assert clue == MANSION_LAYOUT["clue"]


class TestTeardown:
    """Test releasing the map."""

    def test_releases_each_room_once(self):
        """N rooms give exactly N releases, no repeats."""
        mansion = build_mansion()
        released = []
        names = mansion.teardown(on_release=released.append)

        assert len(released) == 7
        assert len({id(room) for room in released}) == 7
        assert names == [room.name for room in released]

    def test_children_before_parent(self):
        """Every room is released after both of its children."""
        mansion = build_mansion()
        parents = {}
        for room in mansion.rooms():
            for child in (room.left, room.right):
                if child is not None:
                    parents[child.name] = room.name

        order = mansion.teardown()
        position = {name: i for i, name in enumerate(order)}
        for child, parent in parents.items():
            assert position[child] < position[parent]
        assert order[-1] == "Hall de entrada"

    def test_post_order_sequence(self):
        order = build_mansion().teardown()
        assert order == [
            "Cozinha", "Sala de Musica", "Jardim de Inverno", "Sala de Estar",
            "Escritorio", "Biblioteca", "Hall de entrada",
        ]

    def test_teardown_unlinks(self):
        mansion = build_mansion()
        hall = mansion.root
        mansion.teardown()
        assert hall.left is None and hall.right is None
        assert mansion.root is None
        assert mansion.current_room is None

    def test_second_teardown_rejected(self):
        """Rooms are never released twice."""
        mansion = build_mansion()
        mansion.teardown()
        with pytest.raises(RuntimeError):
            mansion.teardown()
