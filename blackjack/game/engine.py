"""Blackjack game engine with state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Iterable, NoReturn

from transitions import Machine

from blackjack.cards import Card, Shoe
from blackjack.dealer import dealer_play, peek_for_blackjack
from blackjack.errors import (
    ActionNotLegal,
    BetBelowMinimum,
    BetExceedsBank,
    InsufficientFunds,
    InsuranceExceedsMax,
    InsuranceNotAvailable,
    InvalidHandIndex,
    WrongPhase,
)
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.state import TRANSITIONS, Action, Phase
from blackjack.hand import Hand
from blackjack.rng import new_rng
from blackjack.rules import Outcome, RuleSet, determine_outcome, payout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandResult:
    """Settlement of one player hand."""

    hand_index: int
    outcome: Outcome
    bet: int
    credit: int
    insurance_bet: int = 0
    insurance_credit: int = 0

    @property
    def net(self) -> int:
        """Profit or loss on this hand, insurance included."""
        return self.credit + self.insurance_credit - self.bet - self.insurance_bet


class BlackjackGame:
    """
    Single-player blackjack engine using a state machine.

    Owns the shoe, the bank, the player's hands and the dealer's hand.
    Illegal requests raise a BlackjackError subclass before anything is
    changed; progress is reported through events and the query properties.

    Stake accounting: start_hand and take_insurance leave the bank alone
    and the caller withdraws those stakes (bet and insure do it for you).
    Double and split withdraw their extra stake themselves. Settlement only
    ever credits the bank.
    """

    STATES = [p.name.lower() for p in Phase]

    TRANSITIONS = TRANSITIONS

    def __init__(
        self,
        rules: RuleSet | None = None,
        rng: Random | None = None,
        bank: int | None = None,
        shoe: Iterable[Card] | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            rules: Table rules (defaults if not provided)
            rng: Random source for shuffling; owned by this game
            bank: Starting bank (defaults to rules.starting_bank)
            shoe: Optional stacked card sequence dealt before any shuffle
        """
        self.rules = rules or RuleSet()
        self.rng = rng or new_rng()
        self.shoe = Shoe(rng=self.rng, cards=shoe)
        self.bank = self.rules.starting_bank if bank is None else bank

        self.player_hands: list[Hand] = []
        self.dealer_hand = Hand()
        self.active_hand_index = 0
        self.dealer_has_blackjack = False
        self.insurance_offered = False
        self.results: list[HandResult] = []
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting" if self.bank > 0 else "game_over",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> Phase:
        """Get current phase as enum."""
        return Phase[self._machine_state.upper()]  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def load_shoe(self, cards: Iterable[Card]) -> None:
        """Stack the shoe with a fixed card order (deterministic play)."""
        self.shoe.load(cards)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_hand(self) -> Hand | None:
        """Get the active player hand."""
        if 0 <= self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def dealer_up_card(self) -> Card | None:
        """The dealer's visible card (second dealt)."""
        if len(self.dealer_hand.cards) >= 2:
            return self.dealer_hand.cards[1]
        return None

    @property
    def max_insurance(self) -> int:
        """Largest insurance bet allowed: half the main bet, rounded down."""
        if not self.player_hands:
            return 0
        return self.player_hands[0].bet // 2

    def available_actions(self) -> list[Action]:
        """
        Actions currently legal for the active hand.

        Advisory only: the engine advances on its own after a bust, a 21,
        a double, or a split of aces.
        """
        if self.phase != Phase.PLAYER_ACTION:
            return []

        hand = self.current_hand
        if hand is None or hand.is_bust:
            return []

        if hand.value == 21 or hand.is_split_aces:
            return [Action.STAND]

        actions = [Action.HIT, Action.STAND]
        if hand.can_double and self.bank >= hand.bet:
            actions.append(Action.DOUBLE)
        if self._split_permitted(hand) and self.bank >= hand.bet:
            actions.append(Action.SPLIT)
        if hand.can_surrender:
            actions.append(Action.SURRENDER)
        return actions

    def _split_permitted(self, hand: Hand) -> bool:
        return (
            hand.can_split
            and not hand.is_split_aces
            and len(self.player_hands) < self.rules.max_hands
        )

    # ------------------------------------------------------------------
    # Betting and the deal
    # ------------------------------------------------------------------

    def start_hand(self, bet: int) -> None:
        """
        Deal a new round for the given bet.

        The bank is not debited; the caller withdraws the stake (see bet()).
        When the dealer peeks a natural, the game stops in RESOLUTION and the
        caller settles with resolve_payouts() once the stake is withdrawn.

        Raises:
            WrongPhase: Not in the betting phase
            BetBelowMinimum: Bet is below the table minimum
            BetExceedsBank: Bet is more than the bank holds
        """
        self._require_phase(Phase.BETTING, "start a hand")

        if bet < self.rules.min_bet:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message=f"Minimum bet is {self.rules.min_bet}",
            )
            raise BetBelowMinimum(f"minimum bet is {self.rules.min_bet}")

        if bet > self.bank:
            self.events.emit_new(EventType.INSUFFICIENT_FUNDS, required=bet, available=self.bank)
            raise BetExceedsBank(f"bet of {bet} exceeds bank balance ({self.bank})")

        # History covers the current round only
        self.events.clear_history()

        if self.rules.reshuffle_each_round or self.shoe.is_empty:
            self._refill_shoe()

        self.player_hands = [Hand(bet=bet)]
        self.dealer_hand = Hand()
        self.active_hand_index = 0
        self.dealer_has_blackjack = False
        self.insurance_offered = False
        self.results = []

        self.events.emit_new(EventType.BET_PLACED, amount=bet)

        # Deal: player, dealer (hole), player, dealer (up)
        player_hand = self.player_hands[0]
        self._deal_card(player_hand)
        self._deal_card(self.dealer_hand, face_up=False)
        self._deal_card(player_hand)
        self._deal_card(self.dealer_hand)

        self.events.emit_new(EventType.ROUND_STARTED, bet=bet, up_card=str(self.dealer_up_card))
        logger.debug(
            "Round started: bet=%d player=%s dealer shows %s",
            bet, player_hand, self.dealer_up_card,
        )

        if player_hand.is_blackjack:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)

        up_card = self.dealer_up_card
        if up_card is not None and up_card.is_ace:
            self.insurance_offered = True
            self.events.emit_new(EventType.INSURANCE_OFFERED, max_amount=self.max_insurance)
            self.offer_insurance()
            return

        if up_card is not None and up_card.is_ten_value and self._peek_dealer():
            self.dealer_blackjack()
            return

        self.deal_to_player()

    def bet(self, amount: int) -> None:
        """Start a hand and withdraw the stake, settling at once on a dealer natural."""
        self.start_hand(amount)
        self.bank -= amount
        if self.phase == Phase.RESOLUTION:
            self._resolve_round()

    def _deal_card(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand, rebuilding the shoe if it has run out."""
        if self.shoe.is_empty:
            self._refill_shoe()
        card = self.shoe.draw_one()
        if card is None:
            raise RuntimeError("shoe is empty after a refill")
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand is self.dealer_hand else "player",
            hand_value=hand.value if face_up else None,
        )
        return card

    def _refill_shoe(self) -> None:
        self.shoe.refill()
        self.events.emit_new(EventType.SHOE_SHUFFLED, cards=len(self.shoe))
        logger.info("Shoe rebuilt and shuffled (%d cards)", len(self.shoe))

    def _peek_dealer(self) -> bool:
        """Check the hole card for a natural and record the result."""
        hole_card, up_card = self.dealer_hand.cards[0], self.dealer_hand.cards[1]
        if peek_for_blackjack(up_card, hole_card):
            self.dealer_has_blackjack = True
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            logger.debug("Dealer peeked a natural: %s", self.dealer_hand)
            return True
        return False

    # ------------------------------------------------------------------
    # Insurance
    # ------------------------------------------------------------------

    def take_insurance(self, amount: int) -> None:
        """
        Record an insurance bet on the first hand.

        The caller withdraws the insurance stake before calling (see insure()).
        On a dealer natural the game stops in RESOLUTION and the caller
        settles with resolve_payouts().

        Raises:
            InsuranceNotAvailable: Insurance is not being offered
            InsuranceExceedsMax: Amount is negative or above half the main bet
        """
        self._require_insurance_phase()
        self._check_insurance_amount(amount)

        self.player_hands[0].insurance_bet = amount
        self.events.emit_new(EventType.INSURANCE_TAKEN, amount=amount)
        self._complete_insurance_decision()

    def insure(self, amount: int) -> None:
        """Withdraw an insurance stake and take insurance, settling at once on a dealer natural."""
        self._require_insurance_phase()
        self._check_insurance_amount(amount)
        self._require_funds(amount, "insure")

        self.bank -= amount
        self.take_insurance(amount)
        if self.phase == Phase.RESOLUTION:
            self._resolve_round()

    def _check_insurance_amount(self, amount: int) -> None:
        max_insurance = self.max_insurance
        if amount < 0 or amount > max_insurance:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message=f"Insurance bet must be between 0 and {max_insurance}",
            )
            raise InsuranceExceedsMax(
                f"insurance bet cannot exceed half of original bet ({max_insurance})"
            )

    def decline_insurance(self) -> None:
        """
        Decline insurance and continue the round.

        On a dealer natural the game stops in RESOLUTION; settle with
        resolve_payouts() (see pass_insurance()).

        Raises:
            InsuranceNotAvailable: Insurance is not being offered
        """
        self._require_insurance_phase()
        self.events.emit_new(EventType.INSURANCE_DECLINED)
        self._complete_insurance_decision()

    def pass_insurance(self) -> None:
        """Decline insurance, settling at once on a dealer natural."""
        self.decline_insurance()
        if self.phase == Phase.RESOLUTION:
            self._resolve_round()

    def _require_insurance_phase(self) -> None:
        if self.phase != Phase.INSURANCE:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message="Insurance not available",
                phase=self.phase.name,
            )
            raise InsuranceNotAvailable("insurance not available")

    def _complete_insurance_decision(self) -> None:
        """Peek under the Ace; stop in RESOLUTION on a natural, otherwise let the player act."""
        if self._peek_dealer():
            self.dealer_blackjack()
            return
        self.insurance_settled()

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def player_action(self, action: Action) -> None:
        """
        Apply an action to the active hand.

        Raises:
            WrongPhase: Not in the player action phase
            InvalidHandIndex: Active index does not point at a hand
            ActionNotLegal: Unknown action, or not allowed for this hand
            InsufficientFunds: Bank cannot cover a double or split
        """
        self._require_phase(Phase.PLAYER_ACTION, "act on a hand")

        hand = self.current_hand
        if hand is None:
            raise InvalidHandIndex(f"invalid hand index {self.active_hand_index}")

        handlers: dict[Action, Callable[[Hand], None]] = {
            Action.HIT: self._hit,
            Action.STAND: self._stand,
            Action.DOUBLE: self._double,
            Action.SPLIT: self._split,
            Action.SURRENDER: self._surrender,
        }
        handler = handlers.get(action) if isinstance(action, Action) else None
        if handler is None:
            self._reject(f"Invalid action: {action!r}")

        logger.debug("Hand %d: %s on %s", self.active_hand_index, action, hand)
        handler(hand)

    def _hit(self, hand: Hand) -> None:
        hand.is_initial_deal = False
        self._deal_card(hand)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            hand_index=self.active_hand_index,
            hand_value=hand.value,
        )

        if hand.is_bust:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.active_hand_index)
            self._advance_to_next_hand()
        elif hand.value == 21 or hand.is_split_aces:
            self._advance_to_next_hand()

    def _stand(self, hand: Hand) -> None:
        self.events.emit_new(
            EventType.PLAYER_STAND,
            hand_index=self.active_hand_index,
            hand_value=hand.value,
        )
        self._advance_to_next_hand()

    def _double(self, hand: Hand) -> None:
        if not hand.can_double:
            self._reject("Cannot double")
        self._require_funds(hand.bet, "double")

        self.bank -= hand.bet
        hand.bet *= 2
        hand.doubled = True
        hand.is_initial_deal = False

        self._deal_card(hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_index=self.active_hand_index,
            hand_value=hand.value,
            new_bet=hand.bet,
        )

        if hand.is_bust:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.active_hand_index)

        self._advance_to_next_hand()

    def _split(self, hand: Hand) -> None:
        if not hand.can_split:
            self._reject("Cannot split")
        if hand.is_split_aces:
            self._reject("Cannot resplit aces")
        if len(self.player_hands) >= self.rules.max_hands:
            self._reject(f"Cannot split to more than {self.rules.max_hands} hands")
        self._require_funds(hand.bet, "split")

        self.bank -= hand.bet

        new_hand = Hand(cards=[hand.cards.pop()], bet=hand.bet)
        self.player_hands.insert(self.active_hand_index + 1, new_hand)

        aces = hand.cards[0].is_ace
        self._deal_card(hand)
        self._deal_card(new_hand)

        for h in (hand, new_hand):
            h.is_initial_deal = True
            h.is_from_split = True
            h.is_split_aces = aces

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_index=self.active_hand_index,
            hand1_value=hand.value,
            hand2_value=new_hand.value,
            aces=aces,
        )

        # Split aces get one card each and no further action
        if aces:
            self._advance_to_next_hand()
            self._advance_to_next_hand()

    def _surrender(self, hand: Hand) -> None:
        if not hand.can_surrender:
            self._reject("Cannot surrender")

        hand.surrendered = True
        hand.is_initial_deal = False
        self.events.emit_new(EventType.PLAYER_SURRENDER, hand_index=self.active_hand_index)
        self._advance_to_next_hand()

    def _reject(self, message: str) -> NoReturn:
        self.events.emit_new(EventType.INVALID_ACTION, message=message)
        raise ActionNotLegal(message)

    def _require_funds(self, amount: int, what: str) -> None:
        if amount > self.bank:
            self.events.emit_new(EventType.INSUFFICIENT_FUNDS, required=amount, available=self.bank)
            raise InsufficientFunds(f"insufficient funds to {what}")

    def _require_phase(self, phase: Phase, what: str) -> None:
        if self.phase != phase:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message=f"Cannot {what} in current phase",
                phase=self.phase.name,
            )
            raise WrongPhase(f"cannot {what} during {self.phase}")

    # ------------------------------------------------------------------
    # Dealer turn and settlement
    # ------------------------------------------------------------------

    def _advance_to_next_hand(self) -> None:
        """Move to the next hand, or to the dealer once every hand is played."""
        self.events.emit_new(EventType.HAND_COMPLETED, hand_index=self.active_hand_index)
        self.active_hand_index += 1

        if self.active_hand_index < len(self.player_hands):
            return

        self.player_done()
        self._play_dealer()

    def _play_dealer(self) -> None:
        """Dealer reveals and draws to 17 unless nothing is left to play against."""
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand.cards[0]),
            hand_value=self.dealer_hand.value,
        )

        all_done = all(h.is_bust or h.surrendered for h in self.player_hands)
        if not all_done and not self.dealer_has_blackjack:
            for card in dealer_play(self.shoe, self.dealer_hand):
                self.events.emit_new(
                    EventType.DEALER_HITS,
                    card=str(card),
                    hand_value=self.dealer_hand.value,
                )

            if self.dealer_hand.is_bust:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
            else:
                self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        self.dealer_done()
        self._resolve_round()

    def resolve_payouts(self) -> None:
        """
        Settle a round left in RESOLUTION by start_hand after a dealer natural.

        Raises:
            WrongPhase: Not in the resolution phase
        """
        self._require_phase(Phase.RESOLUTION, "resolve payouts")
        self._resolve_round()

    def _resolve_round(self) -> None:
        """Credit every winning wager and move to BETTING or GAME_OVER."""
        results: list[HandResult] = []
        total_credit = 0

        for i, hand in enumerate(self.player_hands):
            insurance_credit = 0
            if hand.insurance_bet > 0:
                if self.dealer_has_blackjack:
                    insurance_credit = payout(Outcome.WIN, hand.insurance_bet, is_insurance=True)
                    self.events.emit_new(EventType.INSURANCE_WINS, amount=insurance_credit)
                else:
                    insurance_credit = payout(Outcome.LOSE, hand.insurance_bet, is_insurance=True)
                    self.events.emit_new(EventType.INSURANCE_LOSES, amount=hand.insurance_bet)

            if self.dealer_has_blackjack:
                # Only a natural survives a dealer natural
                outcome = Outcome.PUSH if hand.is_blackjack else Outcome.LOSE
                credit = hand.bet if outcome == Outcome.PUSH else 0
            else:
                outcome = determine_outcome(hand, self.dealer_hand)
                credit = payout(outcome, hand.bet)

            self._emit_outcome(i, outcome, credit)
            results.append(
                HandResult(
                    hand_index=i,
                    outcome=outcome,
                    bet=hand.bet,
                    credit=credit,
                    insurance_bet=hand.insurance_bet,
                    insurance_credit=insurance_credit,
                )
            )
            total_credit += credit + insurance_credit

        self.bank += total_credit
        self.results = results
        self.events.emit_new(EventType.ROUND_ENDED, credited=total_credit, bank=self.bank)
        logger.info(
            "Round settled: %s; credited %d, bank %d",
            ", ".join(str(r.outcome) for r in results),
            total_credit,
            self.bank,
        )

        if self.bank <= 0:
            self.events.emit_new(EventType.GAME_ENDED, reason="bankrupt")
            self.bankrupt()
        else:
            self.round_settled()

    def _emit_outcome(self, hand_index: int, outcome: Outcome, credit: int) -> None:
        event_types = {
            Outcome.WIN: EventType.PLAYER_WINS,
            Outcome.BLACKJACK: EventType.PLAYER_WINS,
            Outcome.LOSE: EventType.PLAYER_LOSES,
            Outcome.PUSH: EventType.PUSH,
            Outcome.SURRENDER: EventType.PLAYER_SURRENDERS,
        }
        self.events.emit_new(
            event_types[outcome],
            hand_index=hand_index,
            outcome=outcome.name,
            amount=credit,
        )
