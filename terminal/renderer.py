"""Plain-text rendering of the table for the terminal front end."""

from blackjack.game import Action, BlackjackGame
from blackjack.hand import Hand
from blackjack.rules import Outcome

BOX_WIDTH = 44
_BORDER = "+" + "-" * (BOX_WIDTH - 2) + "+"

ACTION_LABELS = {
    Action.HIT: "(H)it",
    Action.STAND: "(S)tand",
    Action.DOUBLE: "(D)ouble",
    Action.SPLIT: "s(P)lit",
    Action.SURRENDER: "su(R)render",
}


def _row(text: str) -> str:
    return "| " + text.ljust(BOX_WIDTH - 4) + " |"


def _dealer_text(hand: Hand, hide_hole: bool) -> str:
    if hide_hole and len(hand.cards) >= 2:
        shown = ", ".join(["??"] + [str(card) for card in hand.cards[1:]])
        return f"[{shown}]"
    return f"{hand} ({hand.value})"


def _player_text(hand: Hand) -> str:
    text = str(hand)
    text += " (BUST)" if hand.is_bust else f" ({hand.value})"
    if hand.doubled:
        text += " [DOUBLED]"
    if hand.surrendered:
        text += " [SURRENDERED]"
    return text


def render_state(game: BlackjackGame, hide_dealer_hole: bool = True) -> str:
    """Render the dealer's hand, every player hand and the bank as a box."""
    lines = [_BORDER, _row("Dealer: " + _dealer_text(game.dealer_hand, hide_dealer_hole))]

    total = len(game.player_hands)
    for i, hand in enumerate(game.player_hands):
        label = f"You (Hand {i + 1}/{total}): " if total > 1 else "You: "
        marker = "> " if total > 1 and i == game.active_hand_index else ""
        lines.append(_row(marker + label + _player_text(hand)))

    bet = sum(hand.bet for hand in game.player_hands)
    lines.append(_row(f"Bank: {game.bank:<10} Bet: {bet}"))
    lines.append(_BORDER)
    return "\n".join(lines)


def render_available_actions(actions: list[Action]) -> str:
    """Render the action menu, e.g. 'Action: (H)it, (S)tand'."""
    if not actions:
        return ""
    return "Action: " + ", ".join(ACTION_LABELS[action] for action in actions)


def render_result(game: BlackjackGame) -> str:
    """Render the revealed table followed by one line per settled hand."""
    lines = [render_state(game, hide_dealer_hole=False), "", "Results:"]

    total = len(game.results)
    for result in game.results:
        label = f"Hand {result.hand_index + 1}/{total}: " if total > 1 else ""

        if result.insurance_bet:
            if result.insurance_credit:
                lines.append(f"  {label}Insurance pays {result.insurance_credit - result.insurance_bet} chips")
            else:
                lines.append(f"  {label}Insurance loses {result.insurance_bet} chips")

        if result.outcome == Outcome.BLACKJACK:
            lines.append(f"  {label}BLACKJACK! Wins {result.credit - result.bet} chips")
        elif result.outcome == Outcome.WIN:
            lines.append(f"  {label}Win! Pays {result.credit - result.bet} chips")
        elif result.outcome == Outcome.PUSH:
            lines.append(f"  {label}Push! Returns {result.credit} chips")
        elif result.outcome == Outcome.SURRENDER:
            lines.append(f"  {label}Surrender! Returns {result.credit} chips")
        else:
            lines.append(f"  {label}Lose! Loses {result.bet} chips")

    lines.append("")
    lines.append(f"Bank: {game.bank} chips")
    return "\n".join(lines)
