"""Tests for the interactive menu."""

import io

from pyreclaim.menu import MENU_TEXT, Choice, InteractiveMenu
from pyreclaim.models import ProcessRecord


def run_menu(inspector, *lines):
    """Feed lines to a menu and return (exit code, output)."""
    stdin = io.StringIO("".join(f"{line}\n" for line in lines))
    stdout = io.StringIO()
    code = InteractiveMenu(inspector, stdin=stdin, stdout=stdout).run()
    return code, stdout.getvalue()


class TestChoice:
    """Tests for the Choice enum."""

    def test_choice_values(self):
        """Test menu numbers map to choices."""
        assert Choice(1) is Choice.TRIM
        assert Choice(2) is Choice.PROCESSES
        assert Choice(3) is Choice.BOTH
        assert Choice(4) is Choice.EXIT


class TestInteractiveMenu:
    """Tests for InteractiveMenu."""

    def test_exit(self, inspector):
        """Test choice 4 exits with code 0 after one menu."""
        code, output = run_menu(inspector, "4")
        assert code == 0
        assert output.count("Menu:") == 1

    def test_end_of_input_exits(self, inspector):
        """Test closing stdin ends the loop cleanly."""
        code, output = run_menu(inspector)
        assert code == 0
        assert "Menu:" in output

    def test_non_numeric_choice_reprints_menu(self, inspector):
        """Test garbage input is rejected and the menu is shown again."""
        code, output = run_menu(inspector, "hello", "4")

        assert code == 0
        assert "Invalid option. Try again." in output
        assert output.count(MENU_TEXT) == 2

    def test_out_of_range_choice_reprints_menu(self, inspector):
        """Test an unknown number is rejected like garbage."""
        code, output = run_menu(inspector, "9", "0", "4")

        assert code == 0
        assert output.count("Invalid option. Try again.") == 2
        assert output.count(MENU_TEXT) == 3

    def test_trim(self, inspector):
        """Test choice 1 prints the trim report."""
        _, output = run_menu(inspector, "1", "4")

        assert "Before trim: 8192 KB" in output
        assert "After  trim: 6144 KB" in output
        assert inspector.trims == 1

    def test_list_without_kill(self, inspector):
        """Test choice 2 lists matching processes and kills nothing."""
        _, output = run_menu(inspector, "2", "100", "n", "4")

        assert "Processes using >= 100 MB:" in output
        assert " PID=101 name=b rssMB=200" in output
        assert "PID=100" not in output
        assert inspector.terminated == []
        assert inspector.trims == 0

    def test_list_with_kill(self, inspector):
        """Test an affirmative answer terminates every listed process."""
        _, output = run_menu(inspector, "2", "0", "y", "4")

        assert inspector.terminated == [100, 101]
        assert output.index("PID=101 name=b") < output.index("Attempting to terminate PID 100")
        assert "Attempting to terminate PID 101 ... OK" in output

    def test_spanish_affirmative(self, inspector):
        """Test 's' is accepted as yes."""
        run_menu(inspector, "2", "100", "S", "4")
        assert inspector.terminated == [101]

    def test_list_nothing_found(self, inspector):
        """Test an empty listing says so."""
        _, output = run_menu(inspector, "2", "1000", "y", "4")

        assert " No processes found using >= 1000 MB" in output
        assert inspector.terminated == []

    def test_invalid_threshold_returns_to_menu(self, inspector):
        """Test a bad threshold goes back to the menu without listing."""
        code, output = run_menu(inspector, "2", "lots", "4")

        assert code == 0
        assert "Invalid threshold. Returning to menu." in output
        assert output.count(MENU_TEXT) == 2
        assert inspector.snapshots == 0

    def test_negative_threshold_is_invalid(self, inspector):
        """Test negative thresholds are rejected."""
        _, output = run_menu(inspector, "2", "-5", "4")
        assert "Invalid threshold. Returning to menu." in output

    def test_both(self, make_inspector):
        """Test choice 3 trims, then lists."""
        big = ProcessRecord(pid=7, name="big", rss=900 * 1024 * 1024)
        inspector = make_inspector({7: big})
        _, output = run_menu(inspector, "3", "500", "n", "4")

        assert output.index("Before trim:") < output.index("PID=7 name=big rssMB=900")
        assert inspector.trims == 1

    def test_end_of_input_during_prompts(self, inspector):
        """Test stdin closing mid-action exits instead of looping."""
        code, _ = run_menu(inspector, "2", "100")
        assert code == 0
        assert inspector.terminated == []
