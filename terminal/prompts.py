"""Line-based prompts. Each prompt repeats until it gets a valid answer."""

import sys
from typing import TextIO

from blackjack.game import Action
from blackjack.rules import MIN_BET
from terminal.renderer import render_available_actions

ACTION_INPUTS = {
    "h": Action.HIT,
    "hit": Action.HIT,
    "s": Action.STAND,
    "stand": Action.STAND,
    "d": Action.DOUBLE,
    "double": Action.DOUBLE,
    "p": Action.SPLIT,
    "split": Action.SPLIT,
    "r": Action.SURRENDER,
    "surrender": Action.SURRENDER,
}


def _ask(stream: TextIO, out: TextIO | None, prompt: str) -> str:
    """Write a prompt and read one line. Raises EOFError when input ends."""
    out = out or sys.stdout
    out.write(prompt)
    out.flush()
    line = stream.readline()
    if not line:
        raise EOFError("input closed")
    return line.strip()


def _say(out: TextIO | None, message: str) -> None:
    print(message, file=out or sys.stdout)


def prompt_bet(
    stream: TextIO,
    bank: int,
    min_bet: int = MIN_BET,
    out: TextIO | None = None,
) -> int:
    """Ask for a bet between min_bet and the bank."""
    while True:
        answer = _ask(stream, out, f"Enter bet ({min_bet}-{bank}): ")
        try:
            bet = int(answer)
        except ValueError:
            _say(out, "Invalid input. Please enter a number.")
            continue

        if bet < min_bet:
            _say(out, f"Minimum bet is {min_bet}.")
            continue
        if bet > bank:
            _say(out, f"Bet exceeds bank balance ({bank}).")
            continue
        return bet


def prompt_action(
    stream: TextIO,
    actions: list[Action],
    hand_number: int = 1,
    total_hands: int = 1,
    out: TextIO | None = None,
) -> Action:
    """Ask for one of the offered actions."""
    prefix = f"Hand {hand_number}/{total_hands} - " if total_hands > 1 else ""
    while True:
        answer = _ask(stream, out, prefix + render_available_actions(actions) + ": ").lower()
        action = ACTION_INPUTS.get(answer)
        if action is None:
            _say(out, "Invalid action. Please try again.")
            continue
        if action not in actions:
            _say(out, "Action not available. Please choose from available actions.")
            continue
        return action


def prompt_yes_no(stream: TextIO, question: str, out: TextIO | None = None) -> bool:
    """Ask a yes/no question."""
    while True:
        answer = _ask(stream, out, question + " (y/n): ").lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        _say(out, "Invalid input. Please enter 'y' or 'n'.")


def prompt_insurance(stream: TextIO, max_amount: int, out: TextIO | None = None) -> int:
    """Ask for an insurance stake between 0 and max_amount."""
    while True:
        answer = _ask(stream, out, f"Insurance bet (0-{max_amount}): ")
        try:
            amount = int(answer)
        except ValueError:
            _say(out, "Invalid input. Please enter a number.")
            continue

        if amount < 0:
            _say(out, "Insurance bet cannot be negative.")
            continue
        if amount > max_amount:
            _say(out, f"Insurance bet cannot exceed {max_amount}.")
            continue
        return amount
