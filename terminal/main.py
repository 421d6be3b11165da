"""Interactive terminal blackjack."""

import argparse
import dataclasses
import logging
import sys
from typing import TextIO

from blackjack.cards import load_shoe
from blackjack.errors import BlackjackError
from blackjack.game import Action, BlackjackGame, Phase
from blackjack.rng import new_rng
from config import AppConfig, config as default_config
from terminal.prompts import prompt_action, prompt_bet, prompt_insurance, prompt_yes_no
from terminal.renderer import render_result, render_state

logger = logging.getLogger(__name__)

BANNER = """\
+----------------------------------------+
|              BLACKJACK                 |
+----------------------------------------+"""


def build_parser(cfg: AppConfig = default_config) -> argparse.ArgumentParser:
    """Command-line options; defaults come from the environment config."""
    parser = argparse.ArgumentParser(description="Play single-player blackjack in the terminal.")
    parser.add_argument("--seeded", action="store_true", default=cfg.game.seeded,
                        help="Use a fixed random seed (reproducible shuffles)")
    parser.add_argument("--seed", type=int, default=cfg.game.seed,
                        help="Seed used with --seeded")
    parser.add_argument("--shoe", default=cfg.game.shoe_file,
                        help="File of card tokens to deal from before shuffling")
    parser.add_argument("--bank", type=int, default=cfg.game.starting_bank,
                        help="Starting bank in chips")
    parser.add_argument("--reshuffle-each-round", action="store_true",
                        default=cfg.game.reshuffle_each_round,
                        help="Use a fresh deck every round instead of a continuous shoe")
    parser.add_argument("--log-level", default=cfg.logging.level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity (logs go to stderr)")
    return parser


def build_game(args: argparse.Namespace, cfg: AppConfig = default_config) -> BlackjackGame:
    """Create a game from parsed options."""
    rules = dataclasses.replace(
        cfg.game.rules(),
        starting_bank=args.bank,
        reshuffle_each_round=args.reshuffle_each_round,
    )
    game = BlackjackGame(rules=rules, rng=new_rng(seeded=args.seeded, seed=args.seed))
    if args.shoe:
        game.load_shoe(load_shoe(args.shoe))
        logger.info("Loaded stacked shoe from %s (%d cards)", args.shoe, len(game.shoe))
    return game


def _handle_insurance(game: BlackjackGame, stdin: TextIO, stdout: TextIO) -> None:
    max_insurance = min(game.max_insurance, game.bank)
    if max_insurance == 0:
        game.pass_insurance()
        return

    question = f"Dealer shows {game.dealer_up_card}. Take insurance?"
    if prompt_yes_no(stdin, question, out=stdout):
        amount = prompt_insurance(stdin, max_insurance, out=stdout)
        if amount > 0:
            game.insure(amount)
            return
    game.pass_insurance()


def _play_hands(game: BlackjackGame, stdin: TextIO, stdout: TextIO) -> None:
    while game.phase == Phase.PLAYER_ACTION:
        hand = game.current_hand
        actions = game.available_actions()

        if actions == [Action.STAND]:
            if hand is not None and hand.is_blackjack:
                print("Blackjack!", file=stdout)
            game.player_action(Action.STAND)
            continue

        action = prompt_action(
            stdin,
            actions,
            hand_number=game.active_hand_index + 1,
            total_hands=len(game.player_hands),
            out=stdout,
        )
        try:
            game.player_action(action)
        except BlackjackError as exc:
            print(f"Error: {exc}", file=stdout)
            continue

        if game.phase == Phase.PLAYER_ACTION:
            print(render_state(game), file=stdout)
        if action in (Action.HIT, Action.DOUBLE) and hand is not None and hand.is_bust:
            print("BUST!", file=stdout)


def play_round(game: BlackjackGame, stdin: TextIO, stdout: TextIO) -> bool:
    """
    Play one round from bet to settlement.

    Returns:
        False if the bet was rejected and nothing was dealt.
    """
    bet = prompt_bet(stdin, game.bank, game.rules.min_bet, out=stdout)
    try:
        game.bet(bet)
    except BlackjackError as exc:
        print(f"Error: {exc}", file=stdout)
        return False

    print(render_state(game), file=stdout)

    if game.phase == Phase.INSURANCE:
        _handle_insurance(game, stdin, stdout)

    if game.dealer_has_blackjack:
        print("Dealer has Blackjack!", file=stdout)

    _play_hands(game, stdin, stdout)
    print(render_result(game), file=stdout)
    return True


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Entry point for the `blackjack` console script."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.WARNING),
        format=default_config.logging.format,
    )

    try:
        game = build_game(args)
    except (OSError, BlackjackError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(BANNER, file=stdout)
    try:
        while game.phase == Phase.BETTING:
            print(f"\nCurrent Bank: {game.bank} chips", file=stdout)
            if not play_round(game, stdin, stdout):
                continue
            if game.phase == Phase.GAME_OVER:
                print("\nYou're busted. Thanks for playing!", file=stdout)
                break
            if not prompt_yes_no(stdin, "\nPlay another hand?", out=stdout):
                break
    except EOFError:
        logger.debug("Input closed; leaving the table")

    print(f"\nFinal Bank: {game.bank} chips", file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
