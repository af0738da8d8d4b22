"""
Detective Quest - explore the mansion, collect clues, accuse the culprit.
"""

__version__ = "0.1.0"
