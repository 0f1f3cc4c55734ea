from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..services.orchestrator import default_output_path

"""Interactive command parsing, help text and template file."""

__all__ = [
    "PROMPT",
    "HELP_TEXT",
    "TEMPLATE_LINES",
    "CommandKind",
    "Command",
    "parse_command",
    "write_template",
]

PROMPT = 'Please enter an input of the form "<inputFilePath> <outputFilePath>" or enter "?" for help:'

HELP_TEXT = [
    "portfolio-helper",
    "",
    ">> Summary",
    "portfolio-helper tracks a stock portfolio by looking up the current price and dividend history "
    "of each stock and using this to calculate statistics such as the capital gain, total dividends "
    "to date, annual rate of return, etc.",
    "",
    ">> Input File Format",
    "The input file must be a .csv with the following four columns (each with the exact column header as listed):",
    "Stock Symbol: The symbol of the stock, such as MSFT for Microsoft",
    "Purchase Date: The date on which the stock was purchased, such as 1/1/2018",
    "Purchase Share Price: The price per share at which the stock was purchased, such as $100.00",
    "Shares: The number of shares of the stock purchased, such as 10",
    "These columns can appear in any order, and the input file can contain any number of additional columns.",
    "",
    ">> Command Format",
    'Commands should be of the form "<inputFilePath> <outputFilePath>"',
    'In place of <outputFilePath>, you can use "o" to overwrite the input file or "d" to use the default filename.',
    "If <inputFilePath> and <outputFilePath> are equal, the input file will be overwritten.",
    "Example Command: stocks.csv stocks_edited.csv",
    "",
    ">> Additional Commands",
    "quit: Closes the application",
    "?: Prints this help text",
    "template: Creates a template input file named template.csv in the current directory",
    "",
]

TEMPLATE_LINES = [
    "Stock Symbol,Purchase Date,Purchase Share Price,Shares,Additional Notes",
    'MSFT,1/1/2018,$100.00,10,"You can add as many other columns as you like. These will be ignored '
    "(and left untouched) by portfolio-helper. Only the first 4 columns are necessary, "
    'and they can be ordered however you like."',
]


class CommandKind(Enum):
    EMPTY = "empty"
    QUIT = "quit"
    HELP = "help"
    TEMPLATE = "template"
    THANKS = "thanks"
    UPDATE = "update"
    INVALID = "invalid"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    input_path: Path | None = None
    output_path: Path | None = None
    message: str | None = None  # shown for INVALID


_SPECIAL = {
    "q": CommandKind.QUIT,
    "quit": CommandKind.QUIT,
    "exit": CommandKind.QUIT,
    "?": CommandKind.HELP,
    "h": CommandKind.HELP,
    "help": CommandKind.HELP,
    "t": CommandKind.TEMPLATE,
    "template": CommandKind.TEMPLATE,
    "thanks": CommandKind.THANKS,
    "thanks!": CommandKind.THANKS,
    "thankyou": CommandKind.THANKS,
}


def resolve_output(input_path: Path, token: str, default_suffix: str = "_updated") -> Path:
    """Turn the output token of a command into a path."""
    lowered = token.lower()
    if lowered in ("d", "default"):
        return default_output_path(input_path, default_suffix)
    if lowered in ("o", "overwrite", "update"):
        return input_path
    out = Path(token)
    return out if out.suffix == ".csv" else Path(f"{token}.csv")


def parse_command(text: str | None, default_suffix: str = "_updated") -> Command:
    if text is None or not text.strip():
        return Command(CommandKind.EMPTY)

    special = _SPECIAL.get(text.replace(" ", "").lower())
    if special is not None:
        return Command(special)

    tokens = text.split()
    if len(tokens) < 2:
        return Command(CommandKind.INVALID, message='Invalid input. Please try again or enter "?" for help:')
    input_path = Path(tokens[0])
    if input_path.suffix != ".csv":
        return Command(
            CommandKind.INVALID,
            message='The input must be a .csv file. Please try again or enter "?" for help:',
        )
    return Command(
        CommandKind.UPDATE,
        input_path=input_path,
        output_path=resolve_output(input_path, tokens[1], default_suffix),
    )


def write_template(path: Path) -> Path:
    """Write the example input file.

    Raises:
        OSError: If the file cannot be written
    """
    path.write_text("".join(f"{line}\n" for line in TEMPLATE_LINES), encoding="utf-8")
    return path
