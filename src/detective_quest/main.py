#!/usr/bin/env python
"""
Detective Quest
Main entry point for exploring the mansion and solving the case.
"""

import os
import sys
import logging
import traceback
from typing import Callable, Iterable, Optional

from dotenv import load_dotenv

from detective_quest.clue_index import SUSPECTS, reset_clue_index
from detective_quest.mansion import Direction, build_mansion
from detective_quest.resolver import (
    CaseResolver,
    MoveOutcome,
    RoomReport,
    SessionState,
    Verdict,
    parse_command,
)


# Load environment variables
load_dotenv()


def is_debug_mode() -> bool:
    return os.environ.get("DETECTIVE_DEBUG", "").lower() in ("1", "true", "yes")


def log_level() -> int:
    """DEBUG when DETECTIVE_DEBUG is 1/true/yes, WARNING otherwise."""
    return logging.DEBUG if is_debug_mode() else logging.WARNING


# Configure logging for debugging game sessions
logging.basicConfig(
    level=log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


DIRECTION_LABELS = {
    Direction.LEFT: "Left",
    Direction.RIGHT: "Right",
}


def get_error_details(exception):
    """
    Extract detailed error information from an exception.

    Args:
        exception: The exception to analyze

    Returns:
        A formatted string with error details
    """
    error_info = []
    error_info.append(f"Type: {type(exception).__name__}")
    error_info.append(f"Message: {str(exception) or 'no details'}")

    if exception.__cause__ is not None:
        error_info.append(f"Caused by: {type(exception.__cause__).__name__}: {exception.__cause__}")

    if len(exception.args) > 1:
        error_info.append(f"Additional Args: {exception.args[1:]}")

    if isinstance(exception, MemoryError):
        error_info.append("Not enough memory to build the game structures")

    return " | ".join(error_info)


def report_fatal_error(exception) -> None:
    """Print a fatal error, with the stack trace in debug mode."""
    sys.stdout.write(f"\n❌ Fatal error: could not allocate memory!\n")
    sys.stdout.write(f"   📋 {get_error_details(exception)}\n")
    if is_debug_mode():
        sys.stdout.write(f"   🔍 Stack trace:\n")
        for line in traceback.format_exception(type(exception), exception, exception.__traceback__):
            sys.stdout.write(f"      {line}")
    sys.stdout.flush()
    logger.error(f"Fatal error: {get_error_details(exception)}")


def scripted_input(lines: Iterable[str]) -> Callable[[str], str]:
    """
    Build an input() replacement that answers from a script.

    Each answer is echoed after its prompt. Raises EOFError when the
    script runs out, like input() at the end of stdin.
    """
    answers = iter(lines)

    def read(prompt: str = "") -> str:
        try:
            answer = next(answers)
        except StopIteration:
            raise EOFError("script exhausted") from None
        print(f"{prompt}{answer}")
        return answer

    return read


def print_room(report: RoomReport) -> None:
    print("-" * 40)
    print(f"You are in: {report.name}")
    print("-" * 40)
    if report.clue is not None:
        print(f">>> Clue found: \"{report.clue}\"")


def explore_mansion(resolver: CaseResolver, read: Callable[[str], str] = input) -> None:
    """
    Let the player walk the mansion until a dead end or a stop.

    Args:
        resolver: The session to drive
        read: Function returning one line of player input for a prompt
    """
    while resolver.state == SessionState.EXPLORING:
        report = resolver.explore()
        print_room(report)

        if report.dead_end:
            print("End of the path! There are no more rooms to explore from here.")
            break

        print("\nChoose your next move:")
        for direction, room_name in report.exits.items():
            print(f" ({direction.value}) Go {DIRECTION_LABELS[direction]} ({room_name})")
        print(" (s) Stop exploring")

        try:
            raw = read("Option: ")
        except (EOFError, KeyboardInterrupt):
            print()
            raw = "s"

        command = parse_command(raw)
        if command is None:
            print("Invalid option. Try again.\n")
            continue

        outcome = resolver.choose_direction(command)
        if outcome == MoveOutcome.NO_PATH:
            print(f"There is no path to the {command.name.lower()}.")
        elif outcome == MoveOutcome.STOPPED:
            print("You put away your notebook and end the exploration.")
        print()


def judge_case(resolver: CaseResolver, read: Callable[[str], str] = input) -> Verdict:
    """
    Show the notebook and ask for the accusation.

    Returns:
        The final verdict of the session
    """
    clues = resolver.begin_judging()

    print("\n" + "=" * 40)
    print("📓 CLUE NOTEBOOK (alphabetical order)")
    print("=" * 40)

    if resolver.state == SessionState.DONE:
        print("No clues were collected.")
        print("=" * 40)
        print(f"\n{resolver.verdict.message}")
        return resolver.verdict

    for clue in clues:
        print(f" - \"{clue}\"")
    print("=" * 40)

    print(f"\nSuspects: {', '.join(SUSPECTS)}")
    try:
        accused = read("Who is the culprit? ")
    except (EOFError, KeyboardInterrupt):
        print()
        accused = ""

    verdict = resolver.resolve_accusation(accused)

    print("\n🔎 Evidence per suspect:")
    if verdict.tally:
        for suspect, count in verdict.tally.items():
            print(f"  {suspect}: {count} clue(s)")
    else:
        print("  No clue points to any suspect.")

    print(f"\n⚖️  {verdict.message}")
    return verdict


def run_game(read: Callable[[str], str] = input) -> Optional[Verdict]:
    """
    Run a complete session: explore, list the clues, judge the accusation.

    Args:
        read: Function returning one line of player input for a prompt

    Returns:
        The verdict of the session
    """
    print("\n" + "=" * 40)
    print("🔍 WELCOME TO DETECTIVE QUEST! 🔍")
    print("=" * 40)
    print("Explore the mansion to find the clues.\n")

    mansion = build_mansion()
    index = reset_clue_index()
    resolver = CaseResolver(mansion, index)

    try:
        explore_mansion(resolver, read)
        verdict = judge_case(resolver, read)
    finally:
        mansion.teardown()
        resolver.ledger.teardown()

    print("\nThanks for playing!")
    return verdict


def run_demo() -> Optional[Verdict]:
    """
    Run a scripted session: hall, living room, kitchen, then accuse the butler.
    """
    print("\n" + "=" * 40)
    print("🧪 SCRIPTED DEMO")
    print("=" * 40)
    return run_game(scripted_input(["e", "e", "Mordomo"]))


def main():
    """Main entry point."""
    try:
        if len(sys.argv) > 1:
            if sys.argv[1] == "demo":
                run_demo()
            elif sys.argv[1] == "play":
                run_game()
            else:
                print("Usage: python -m detective_quest.main [play|demo]")
                print("  play: explore the mansion interactively (default)")
                print("  demo: run a scripted session")
                sys.exit(2)
        else:
            run_game()
    except MemoryError as e:
        report_fatal_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
