"""End-to-end tests for the terminal game."""

import io
import os
from unittest.mock import patch

import pytest

from config import AppConfig, GameConfig
from terminal.main import build_game, build_parser, main


@pytest.fixture
def shoe_file(tmp_path):
    """Write a stacked shoe file and return its path."""

    def _write(tokens: str) -> str:
        path = tmp_path / "shoe.txt"
        path.write_text("# stacked\n" + "\n".join(tokens.split()) + "\n", encoding="utf-8")
        return str(path)

    return _write


def run(argv, script):
    """Run main with scripted input; return (exit code, output)."""
    out = io.StringIO()
    code = main(argv, stdin=io.StringIO(script), stdout=out)
    return code, out.getvalue()


class TestMain:
    """Scripted sessions through main()."""

    def test_blackjack_round(self, shoe_file):
        """Test a natural stands automatically and pays 3:2."""
        argv = ["--shoe", shoe_file("AS KC KH QC"), "--bank", "1000"]
        code, text = run(argv, "100\nn\n")
        assert code == 0
        assert "Blackjack!" in text
        assert "BLACKJACK! Wins 150 chips" in text
        assert text.rstrip().endswith("Final Bank: 1150 chips")

    def test_split_round(self, shoe_file):
        """Test splitting 8s and standing on both hands."""
        argv = ["--shoe", shoe_file("8S 9C 8H 7C 3D 10D KS"), "--bank", "1000"]
        code, text = run(argv, "100\np\ns\ns\nn\n")
        assert code == 0
        assert "Hand 1/2 - Action:" in text
        assert "Hand 2/2: Win! Pays 100 chips" in text
        assert "Final Bank: 1200 chips" in text

    def test_invalid_input_reprompts(self, shoe_file):
        """Test bad bets and actions are asked again, then a double busts."""
        argv = ["--shoe", shoe_file("10S 10C 6H 7C KD"), "--bank", "1000"]
        code, text = run(argv, "abc\n0\n5000\n100\nx\nd\nn\n")
        assert code == 0
        assert "Invalid input. Please enter a number." in text
        assert "Minimum bet is 1." in text
        assert "Bet exceeds bank balance (1000)." in text
        assert "Invalid action. Please try again." in text
        assert "BUST!" in text
        assert "Final Bank: 800 chips" in text

    def test_insurance_round(self, shoe_file):
        """Test taking insurance against a dealer natural breaks even."""
        argv = ["--shoe", shoe_file("10S KC 9H AD"), "--bank", "1000"]
        code, text = run(argv, "100\ny\n50\nn\n")
        assert code == 0
        assert "Take insurance? (y/n): " in text
        assert "Dealer has Blackjack!" in text
        assert "Insurance pays 100 chips" in text
        assert "Final Bank: 1000 chips" in text

    def test_game_over(self, shoe_file):
        """Test losing the whole bank ends the session."""
        argv = ["--shoe", shoe_file("10S 10C 6H 7C"), "--bank", "100"]
        code, text = run(argv, "100\ns\n")
        assert code == 0
        assert "You're busted. Thanks for playing!" in text
        assert "Final Bank: 0 chips" in text

    def test_end_of_input_quits(self):
        """Test closed input leaves the table cleanly."""
        code, text = run(["--seeded", "--bank", "1000"], "")
        assert code == 0
        assert "Final Bank: 1000 chips" in text

    def test_missing_shoe_file(self, tmp_path, capsys):
        """Test an unreadable shoe file exits with status 2."""
        code, _ = run(["--shoe", str(tmp_path / "missing.txt")], "")
        assert code == 2
        assert "Error:" in capsys.readouterr().err

    def test_bad_card_in_shoe_file(self, tmp_path, capsys):
        """Test a malformed shoe file exits with status 2."""
        path = tmp_path / "shoe.txt"
        path.write_text("AS\nQQ\n", encoding="utf-8")
        code, _ = run(["--shoe", str(path)], "")
        assert code == 2
        assert ":2:" in capsys.readouterr().err


class TestBuildGame:
    """Tests for option parsing and game construction."""

    def test_defaults_from_config(self):
        """Test parser defaults come from the supplied config."""
        with patch.dict(os.environ, {}, clear=True):
            cfg = AppConfig(game=GameConfig(starting_bank=50, reshuffle_each_round=True))
        args = build_parser(cfg).parse_args([])
        assert args.bank == 50
        assert args.reshuffle_each_round
        assert args.shoe is None

        game = build_game(args, cfg)
        assert game.bank == 50
        assert game.rules.reshuffle_each_round

    def test_seeded_games_match(self):
        """Test --seeded games shuffle identically."""
        parser = build_parser()
        game1 = build_game(parser.parse_args(["--seeded", "--seed", "5", "--bank", "100"]))
        game2 = build_game(parser.parse_args(["--seeded", "--seed", "5", "--bank", "100"]))
        game1.start_hand(10)
        game2.start_hand(10)
        assert game1.player_hands[0].cards == game2.player_hands[0].cards

    def test_invalid_bank_rejected(self):
        """Test a bank below the minimum bet fails rule validation."""
        args = build_parser().parse_args(["--bank", "0"])
        with pytest.raises(ValueError):
            build_game(args)
