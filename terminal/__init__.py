"""Terminal front end for the blackjack engine."""
