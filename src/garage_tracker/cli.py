"""Interactive command shell for the garage."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, Optional, TextIO

from .config import AppConfig, get_config_path, load_config
from .state import Garage, UnknownCategoryError

logger = logging.getLogger(__name__)

COMMANDS_HELP = """
Here are the commands you can use:
  add_machine <id> <type>        (e.g. add_machine ABC123 Car; type is Bike, Car or Truck)
  unpark_machine <id>            (e.g. unpark_machine ABC123)
  check_availability
  check_full
  locate_machine <id>            (e.g. locate_machine ABC123)
  commands                       (Show the list of commands again)
  quit"""

USAGE = {
    "add_machine": "Usage: add_machine <id> <type>",
    "unpark_machine": "Usage: unpark_machine <id>",
    "check_availability": "Usage: check_availability",
    "check_full": "Usage: check_full",
    "locate_machine": "Usage: locate_machine <id>",
    "commands": "Usage: commands",
}


class CommandShell:
    """
    Line-oriented front end over a Garage.

    Each input line is one command; tokens are separated by whitespace and
    keywords are case-sensitive. Reports are written to the output stream.
    """

    def __init__(self, garage: Garage, output: Optional[TextIO] = None):
        self.garage = garage
        self.output = output if output is not None else sys.stdout
        self._handlers = {
            "add_machine": (2, self._add_machine),
            "unpark_machine": (1, self._unpark_machine),
            "check_availability": (0, self._check_availability),
            "check_full": (0, self._check_full),
            "locate_machine": (1, self._locate_machine),
            "commands": (0, self._show_commands),
        }

    def write(self, text: str = "") -> None:
        print(text, file=self.output)

    def handle(self, line: str) -> bool:
        """
        Run a single command line.

        Returns:
            False if the command was quit, True to keep going
        """
        tokens = line.split()
        if not tokens:
            return True

        cmd, args = tokens[0], tokens[1:]

        if cmd == "quit":
            self.write("Exiting the Garage System. Have a great day!")
            return False

        entry = self._handlers.get(cmd)
        if entry is None:
            logger.debug(f"Unrecognized command: {cmd}")
            self.write("Sorry, I don't recognize that command. Type 'commands' for options.")
            return True

        arity, handler = entry
        if len(args) != arity:
            self.write(USAGE[cmd])
            return True

        handler(*args)
        return True

    def run(self, lines: Iterator[str], prompt: bool = True) -> int:
        """
        Process commands until quit or end of input.

        Returns:
            Process exit code
        """
        self.write("\nWelcome to the Garage System!")
        self._show_commands()

        while True:
            if prompt:
                self.output.write("\nEnter command: ")
                self.output.flush()
            line = next(lines, None)
            if line is None:
                self.write()
                break
            if not self.handle(line):
                break

        return 0

    def _add_machine(self, identifier: str, type_name: str) -> None:
        try:
            result = self.garage.park_by_name(identifier, type_name)
        except UnknownCategoryError as e:
            self.write(str(e))
            return
        self.write(result.message)

    def _unpark_machine(self, identifier: str) -> None:
        self.write(self.garage.unpark(identifier).message)

    def _check_availability(self) -> None:
        self.write("\n=== Current Availability ===")
        for level in self.garage.availability():
            self.write(f"Level {level.level}: {level.free_slots} slot(s) free.")

    def _check_full(self) -> None:
        if self.garage.is_full():
            self.write("The garage is completely full.")
        else:
            self.write("The garage still has space available.")

    def _locate_machine(self, identifier: str) -> None:
        self.write(self.garage.locate(identifier).message)

    def _show_commands(self) -> None:
        self.write(COMMANDS_HELP)


class DimensionReader:
    """
    Reads whitespace-separated integers from input lines.

    Several values may share one line ("2 10"), or each may sit on its own
    line. A prompt is only shown when no token is already waiting.
    """

    def __init__(self, lines: Iterator[str], output: TextIO):
        self._lines = lines
        self._output = output
        self._pending: list[str] = []

    def read(self, prompt: str) -> int:
        """
        Prompt for and read one non-negative integer.

        Raises:
            ValueError: On end of input or a value that is not a non-negative integer
        """
        if not self._pending:
            self._output.write(prompt)
            self._output.flush()

        while not self._pending:
            line = next(self._lines, None)
            if line is None:
                raise ValueError("Unexpected end of input while reading garage dimensions")
            self._pending = line.split()

        value = int(self._pending.pop(0))
        if value < 0:
            raise ValueError(f"Expected a non-negative number, got {value}")
        return value


def load_app_config(path: Optional[str]) -> AppConfig:
    """Load the config file if one was given or exists at the default path."""
    config_path = Path(path) if path else get_config_path()

    if path or config_path.exists():
        return load_config(config_path)

    return AppConfig()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="garage-tracker",
        description="Track vehicles in a multi-level parking garage.",
    )
    parser.add_argument("--levels", type=int, default=None, help="Number of levels")
    parser.add_argument("--slots", type=int, default=None, help="Slots on each level")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    return parser.parse_args(argv)


def main(
    argv: Optional[list[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """CLI entry point."""
    args = parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        config = load_app_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=stdout)
        return 1

    logging.basicConfig(
        level=(args.log_level or config.logging.level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    lines = iter(stdin.readline, "")
    reader = DimensionReader(lines, stdout)

    try:
        levels = args.levels
        if levels is None:
            levels = config.garage.levels
        if levels is None:
            levels = reader.read("Number of levels in your parking garage: ")

        slots = args.slots
        if slots is None:
            slots = config.garage.slots_per_level
        if slots is None:
            slots = reader.read("Number of slots on each level: ")

        garage = Garage(
            levels,
            slots,
            allow_category_fallback=config.garage.allow_category_fallback,
        )
    except ValueError as e:
        print(f"Error: {e}", file=stdout)
        return 1

    shell = CommandShell(garage, output=stdout)
    return shell.run(lines)


if __name__ == "__main__":
    sys.exit(main())
