"""Interactive menu for pyreclaim."""

import logging
import sys
from enum import Enum
from typing import TextIO

from pyreclaim.console import show_processes, show_trim, terminate_all
from pyreclaim.inspector import ProcessInspector
from pyreclaim.reclaim import list_high_memory_processes, trim_working_set

logger = logging.getLogger(__name__)

MENU_TEXT = """
Menu:
 1) Trim memory of the current process
 2) List processes using a lot of memory (and optionally terminate them)
 3) Trim memory and handle processes (1+2)
 4) Exit"""

AFFIRMATIVE = frozenset({"y", "Y", "s", "S"})


class Choice(Enum):
    """Menu choices."""

    TRIM = 1
    PROCESSES = 2
    BOTH = 3
    EXIT = 4


class InteractiveMenu:
    """
    Read-eval loop over the four menu choices.

    Malformed input never ends the loop; only the Exit choice or end of
    input does.
    """

    def __init__(
        self,
        inspector: ProcessInspector,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """
        Initialize the InteractiveMenu.

        Args:
            inspector: Platform inspector used by every action.
            stdin: Input stream. Default sys.stdin.
            stdout: Output stream. Default sys.stdout.
        """
        self._inspector = inspector
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def run(self) -> int:
        """Run until the operator exits. Returns the process exit code."""
        while True:
            self._print(MENU_TEXT)
            answer = self._ask("Choose an option: ")
            if answer is None:
                return 0

            choice = self._parse_choice(answer)
            if choice is None:
                self._print("Invalid option. Try again.")
                continue
            if choice is Choice.EXIT:
                return 0

            if choice in (Choice.TRIM, Choice.BOTH):
                show_trim(trim_working_set(self._inspector), self._stdout)
            if choice in (Choice.PROCESSES, Choice.BOTH):
                if not self._handle_processes():
                    return 0

    def _handle_processes(self) -> bool:
        """List (and maybe terminate) processes. False on end of input."""
        answer = self._ask("Threshold in MB for listing processes: ")
        if answer is None:
            return False
        threshold = self._parse_threshold(answer)
        if threshold is None:
            self._print("Invalid threshold. Returning to menu.")
            return True

        answer = self._ask("Terminate listed processes? (y/n): ")
        if answer is None:
            return False
        do_kill = answer[:1] in AFFIRMATIVE

        self._print(f"Processes using >= {threshold} MB:")
        records = list_high_memory_processes(threshold, self._inspector)
        show_processes(records, threshold, self._stdout, indent=" ")
        if do_kill:
            terminate_all(records, self._inspector, self._stdout)
        return True

    def _ask(self, prompt: str) -> str | None:
        self._stdout.write(prompt)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            logger.debug("End of input")
            self._print("")
            return None
        return line.strip()

    def _print(self, text: str) -> None:
        print(text, file=self._stdout)

    @staticmethod
    def _parse_choice(answer: str) -> Choice | None:
        try:
            return Choice(int(answer))
        except ValueError:
            return None

    @staticmethod
    def _parse_threshold(answer: str) -> int | None:
        try:
            threshold = int(answer)
        except ValueError:
            return None
        return threshold if threshold >= 0 else None
