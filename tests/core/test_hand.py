"""Tests for Hand evaluation."""

from hypothesis import given, strategies as st

from blackjack.cards import Card, Rank, Suit
from blackjack.hand import Hand

card_strategy = st.builds(Card, st.sampled_from(list(Rank)), st.sampled_from(list(Suit)))


class TestHandTotals:
    """Tests for hard and soft totals."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.totals() == (0, 0, False)
        assert empty_hand.value == 0
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_bust

    def test_hard_hand_value(self, hard_16_hand):
        """Test hard hand value calculation."""
        assert hard_16_hand.totals() == (16, 16, False)
        assert hard_16_hand.value == 16

    def test_soft_hand_value(self, soft_17_hand):
        """Test soft hand value calculation."""
        assert soft_17_hand.totals() == (7, 17, True)
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_soft_to_hard_transition(self):
        """Test ace switching from 11 to 1."""
        hand = Hand()
        hand.add_card(Card(Rank.ACE, Suit.SPADES))
        assert hand.value == 11
        assert hand.is_soft

        hand.add_card(Card(Rank.FIVE, Suit.HEARTS))
        assert hand.value == 16
        assert hand.is_soft

        hand.add_card(Card(Rank.EIGHT, Suit.CLUBS))
        assert hand.value == 14
        assert not hand.is_soft

    def test_multiple_aces_promote_only_one(self, make_hand):
        """Test that only one Ace is ever counted as 11."""
        assert make_hand("AS AH").totals() == (2, 12, True)
        assert make_hand("AS AH AD AC").totals() == (4, 14, True)
        assert make_hand("AS AH 9C").value == 21
        assert make_hand("AS AH 9C KD").totals() == (21, 21, False)

    def test_bust(self, bust_hand):
        """Test bust detection."""
        assert bust_hand.is_bust
        assert bust_hand.value == 26

    @given(st.lists(card_strategy, min_size=0, max_size=8))
    def test_totals_invariants(self, cards):
        """Test hard <= soft <= hard + 10 and is_soft iff an Ace fits as 11."""
        hand = Hand(cards=cards)
        hard, soft, is_soft = hand.totals()
        assert hard <= soft <= hard + 10
        has_ace = any(c.rank == Rank.ACE for c in cards)
        assert is_soft == (has_ace and hard + 10 <= 21)
        assert hand.value == (soft if is_soft else hard)
        assert soft == hard + (10 if is_soft else 0)


class TestBlackjack:
    """Tests for natural blackjack detection."""

    def test_blackjack(self, blackjack_hand):
        """Test Ace + King on the deal is blackjack."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.value == 21

    def test_not_blackjack_after_action(self, blackjack_hand):
        """Test the same cards after an action are not blackjack."""
        blackjack_hand.is_initial_deal = False
        assert blackjack_hand.value == 21
        assert not blackjack_hand.is_blackjack

    def test_not_blackjack_from_split(self, make_hand):
        """Test 21 in two cards after a split is not blackjack."""
        hand = make_hand("AS KH", is_from_split=True)
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_not_blackjack_three_cards(self, make_hand):
        """Test that 21 with 3 cards is not blackjack."""
        hand = make_hand("7S 7H 7C")
        assert hand.value == 21
        assert not hand.is_blackjack


class TestHandEligibility:
    """Tests for split, double and surrender eligibility."""

    def test_pair_can_split(self, pair_8s_hand):
        """Test a pair of eights can split."""
        assert pair_8s_hand.can_split

    def test_equal_value_different_rank_cannot_split(self, make_hand):
        """Test King + Queen does not split despite equal value."""
        assert not make_hand("KS QH").can_split

    def test_cannot_split_after_action(self, pair_8s_hand):
        """Test splitting requires an untouched hand."""
        pair_8s_hand.is_initial_deal = False
        assert not pair_8s_hand.can_split

    def test_cannot_split_three_cards(self, make_hand):
        """Test splitting requires exactly two cards."""
        assert not make_hand("8S 8H 8C").can_split

    def test_split_hand_pair_can_split_again(self, make_hand):
        """Test a post-split pair stays splittable."""
        assert make_hand("8S 8D", is_from_split=True).can_split

    def test_can_double_on_initial_deal(self, hard_16_hand):
        """Test doubling is allowed before any action."""
        assert hard_16_hand.can_double
        hard_16_hand.is_initial_deal = False
        assert not hard_16_hand.can_double

    def test_split_aces_cannot_double(self, make_hand):
        """Test split aces never double."""
        assert not make_hand("AS 9D", is_split_aces=True, is_from_split=True).can_double

    def test_can_surrender(self, hard_16_hand, make_hand):
        """Test late surrender needs an untouched two-card hand."""
        assert hard_16_hand.can_surrender
        assert not make_hand("5S 5H 2C").can_surrender
        hard_16_hand.is_initial_deal = False
        assert not hard_16_hand.can_surrender

    def test_new_hand_defaults(self):
        """Test a fresh hand has no action taken and no side bets."""
        hand = Hand(bet=25)
        assert hand.bet == 25
        assert hand.is_initial_deal
        assert not (hand.doubled or hand.surrendered or hand.is_split_aces or hand.is_from_split)
        assert hand.insurance_bet == 0

    def test_str(self, make_hand):
        """Test hand string representation."""
        assert str(make_hand("AS 10H")) == "[A♠, 10♥]"
