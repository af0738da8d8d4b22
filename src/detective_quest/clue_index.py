"""
Clue Index - Hash table mapping clue text to the suspect it incriminates.

The table is built once from the curated case dataset and is read-only
afterwards. Buckets are singly linked chains; new entries are pushed at the
head of their chain, so when a clue text appears twice the most recent
suspect shadows the older one.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


# Number of buckets in the shipped table
TABLE_SIZE = 10

# djb2 parameters
HASH_SEED = 5381
HASH_MULTIPLIER = 33
# Accumulator width (an unsigned long on the platforms the game shipped for)
HASH_MASK = 0xFFFFFFFFFFFFFFFF


# ============================================================================
# CASE DATASET
# Every clue hidden in the mansion and the suspect it points to.
# ============================================================================

SUSPECT_CLUES = [
    ("Uma bota suja de lama foi deixada perto da porta.", "Mordomo"),
    ("Ha uma xicara de cha ainda morna sobre a mesa.", "Mordomo"),
    ("Facas foram limpas recentemente.", "Cozinheiro"),
    ("Um livro sobre venenos esta fora do lugar.", "Governanta"),
    ("Uma carta amassada esta na lixeira.", "Governanta"),
    ("Uma corda de piano esta arrebentada.", "Jardineiro"),
]

SUSPECTS = ["Mordomo", "Cozinheiro", "Governanta", "Jardineiro"]


def hash_clue(text: str, table_size: int = TABLE_SIZE) -> int:
    """
    Map clue text to a bucket index with the djb2 string hash.

    Python's built-in hash() is salted per process, so the index is
    computed explicitly from the UTF-8 bytes to stay identical across runs.

    Args:
        text: The clue text to hash
        table_size: Number of buckets

    Returns:
        Bucket index in range [0, table_size)
    """
    if table_size <= 0:
        raise ValueError("table_size must be positive")

    acc = HASH_SEED
    for byte in text.encode("utf-8"):
        acc = (acc * HASH_MULTIPLIER + byte) & HASH_MASK
    return acc % table_size


@dataclass
class SuspectEntry:
    """One link in a bucket chain."""
    clue_text: str
    suspect: str
    next: Optional["SuspectEntry"] = None


class ClueIndex:
    """
    Fixed-size chained hash table from clue text to suspect name.

    Only insertion (during build) and lookup are supported; entries are
    never updated or removed individually.
    """

    def __init__(self, table_size: int = TABLE_SIZE):
        if table_size <= 0:
            raise ValueError("table_size must be positive")
        self.table_size = table_size
        self.buckets: list[Optional[SuspectEntry]] = [None] * table_size
        self._count = 0

    @classmethod
    def build(cls, dataset: Iterable[Tuple[str, str]], table_size: int = TABLE_SIZE) -> "ClueIndex":
        """Create a table and insert every (clue_text, suspect) pair in order."""
        index = cls(table_size)
        for clue_text, suspect in dataset:
            index.insert(clue_text, suspect)
        logger.debug(f"Built clue index: {index._count} entries in {table_size} buckets")
        return index

    def insert(self, clue_text: str, suspect: str) -> None:
        """Push a new entry at the head of its bucket chain."""
        slot = hash_clue(clue_text, self.table_size)
        self.buckets[slot] = SuspectEntry(clue_text, suspect, self.buckets[slot])
        self._count += 1

    def lookup(self, text: str) -> Optional[str]:
        """
        Find the suspect associated with a clue.

        Returns:
            The suspect from the first matching entry in the chain, or None
        """
        entry = self.buckets[hash_clue(text, self.table_size)]
        while entry is not None:
            if entry.clue_text == text:
                return entry.suspect
            entry = entry.next
        return None

    def bucket(self, slot: int) -> list[Tuple[str, str]]:
        """Get the (clue_text, suspect) pairs of one chain, head first."""
        pairs = []
        entry = self.buckets[slot]
        while entry is not None:
            pairs.append((entry.clue_text, entry.suspect))
            entry = entry.next
        return pairs

    def teardown(self) -> int:
        """
        Release every chain in every bucket.

        Returns:
            Number of entries released
        """
        released = 0
        for slot in range(self.table_size):
            entry = self.buckets[slot]
            while entry is not None:
                following = entry.next
                entry.next = None
                released += 1
                entry = following
            self.buckets[slot] = None
        self._count = 0
        logger.debug(f"Released {released} clue index entries")
        return released

    def __len__(self) -> int:
        return self._count

    def __contains__(self, text: str) -> bool:
        return self.lookup(text) is not None


def build_clue_index(dataset: Iterable[Tuple[str, str]] = SUSPECT_CLUES,
                     table_size: int = TABLE_SIZE) -> ClueIndex:
    """Build the clue index from a dataset (the case dataset by default)."""
    return ClueIndex.build(dataset, table_size)


# Global clue index instance
_clue_index: Optional[ClueIndex] = None


def get_clue_index() -> ClueIndex:
    """Get or build the shared clue index for the case dataset."""
    global _clue_index
    if _clue_index is None:
        _clue_index = build_clue_index()
    return _clue_index


def reset_clue_index() -> ClueIndex:
    """Rebuild the shared clue index from scratch."""
    global _clue_index
    if _clue_index is not None:
        _clue_index.teardown()
    _clue_index = build_clue_index()
    return _clue_index
