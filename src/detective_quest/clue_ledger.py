"""
Clue Ledger - The detective's notebook of collected clues.

Clues are kept in an unbalanced binary search tree keyed by their text, so
the notebook can always be read back in alphabetical order. Picking up a
clue that is already written down changes nothing.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class ClueEntry:
    """A node of the ledger tree."""
    text: str
    left: Optional["ClueEntry"] = None
    right: Optional["ClueEntry"] = None


def _insert(node: Optional[ClueEntry], text: str) -> tuple[ClueEntry, bool]:
    """
    Insert text below node.

    Returns:
        (subtree, created) - the subtree to bind in the parent's slot and
        whether a new entry was made
    """
    if node is None:
        return ClueEntry(text), True

    if text < node.text:
        node.left, created = _insert(node.left, text)
    elif text > node.text:
        node.right, created = _insert(node.right, text)
    else:
        created = False
    return node, created


def _in_order(node: Optional[ClueEntry]) -> Iterator[str]:
    if node is None:
        return
    yield from _in_order(node.left)
    yield node.text
    yield from _in_order(node.right)


def _release(node: Optional[ClueEntry]) -> int:
    # Post-order: both subtrees go before the node itself
    if node is None:
        return 0
    released = _release(node.left) + _release(node.right)
    node.left = None
    node.right = None
    return released + 1


class ClueLedger:
    """
    Ordered set of collected clue texts.

    The tree is never rebalanced; clue count is bounded by the number of
    rooms so a degenerate shape costs nothing noticeable.
    """

    def __init__(self):
        self.root: Optional[ClueEntry] = None
        self._count = 0

    def insert(self, text: str) -> bool:
        """
        Record a clue.

        Args:
            text: The clue text

        Returns:
            True if the clue was new, False if it was already recorded
        """
        self.root, created = _insert(self.root, text)
        if created:
            self._count += 1
            logger.debug(f"Recorded clue #{self._count}: {text!r}")
        else:
            logger.debug(f"Clue already recorded: {text!r}")
        return created

    def in_order(self) -> Iterator[str]:
        """Lazily yield every clue in ascending alphabetical order."""
        return _in_order(self.root)

    def is_empty(self) -> bool:
        return self.root is None

    def teardown(self) -> int:
        """
        Release every entry, leaving the ledger empty.

        Returns:
            Number of entries released
        """
        released = _release(self.root)
        self.root = None
        self._count = 0
        return released

    def __iter__(self) -> Iterator[str]:
        return self.in_order()

    def __len__(self) -> int:
        return self._count

    def __contains__(self, text: str) -> bool:
        node = self.root
        while node is not None:
            if text == node.text:
                return True
            node = node.left if text < node.text else node.right
        return False
