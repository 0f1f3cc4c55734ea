from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from ..config.loader import ConfigError, PortfolioConfig, load_config
from ..logging.init import set_debug, setup_logging
from ..models.processing_result import TableResult
from ..services.market_data import MarketDataProvider, YahooFinanceProvider
from ..services.orchestrator import ProcessingError, TableIOError, process_file
from .commands import HELP_TEXT, PROMPT, CommandKind, parse_command, resolve_output, write_template

"""CLI application.

Two modes:
- one-shot: ``portfolio-helper <input> [<output>|o|d]`` updates one table and exits
- interactive: with no positional arguments, prompt for commands until quit
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Update a stock portfolio CSV with current prices and gains")
    p.add_argument("input", nargs="?", help="Input .csv file (omit for interactive mode)")
    p.add_argument("output", nargs="?", help="Output .csv file, 'o' to overwrite or 'd' for <input>_updated.csv")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/portfolio.yml if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _make_provider(cfg: PortfolioConfig) -> MarketDataProvider:
    return YahooFinanceProvider(
        price_period=cfg.market_data.price_period,
        price_interval=cfg.market_data.price_interval,
    )


def _run_update(input_path: Path, output_path: Path, provider: MarketDataProvider) -> TableResult | None:
    """Run one table update, logging (not raising) table-level failures."""
    logger = setup_logging()
    try:
        return process_file(input_path, output_path, provider)
    except TableIOError as e:
        logger.error(f"io: {e}")
    except ProcessingError as e:
        logger.error(f"table: {e}")
    return None


def _template(cfg: PortfolioConfig) -> None:
    logger = setup_logging()
    path = Path(cfg.template_path)
    try:
        write_template(path)
    except OSError as e:
        logger.error(
            f"{path} is currently in use so could not be written to. "
            f"Please close the application using {path} and try again. ({e})"
        )
        return
    logger.info(f"An example input file has been saved in the current directory as {path}.")


def interactive(
    cfg: PortfolioConfig,
    provider: MarketDataProvider,
    read_line: Callable[[], str] = input,
) -> int:
    """Prompt loop; returns when the user quits or input ends."""
    write_prompt = True
    while True:
        if write_prompt:
            print(PROMPT)
        try:
            text = read_line()
        except EOFError:
            return EXIT_SUCCESS_ALL

        cmd = parse_command(text, cfg.output.default_suffix)
        write_prompt = True
        if cmd.kind is CommandKind.QUIT:
            return EXIT_SUCCESS_ALL
        if cmd.kind is CommandKind.EMPTY:
            write_prompt = False
        elif cmd.kind is CommandKind.HELP:
            print("\n".join(HELP_TEXT))
            write_prompt = False
        elif cmd.kind is CommandKind.TEMPLATE:
            _template(cfg)
        elif cmd.kind is CommandKind.THANKS:
            print("You're welcome!")
        elif cmd.kind is CommandKind.INVALID:
            print(cmd.message)
            write_prompt = False
        else:
            _run_update(cmd.input_path, cmd.output_path, provider)  # type: ignore[arg-type]


def main(argv: list[str] | None = None, provider: MarketDataProvider | None = None) -> int:
    logger = setup_logging()

    # NOTE: only read sys.argv when argv is None; an explicit [] means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if provider is None:
        provider = _make_provider(cfg)

    if args.input is None:
        return interactive(cfg, provider)

    input_path = Path(args.input)
    if input_path.suffix != ".csv":
        logger.error(f"input: the input must be a .csv file: {input_path}")
        return EXIT_FATAL
    output_path = resolve_output(input_path, args.output or "d", cfg.output.default_suffix)
    result = _run_update(input_path, output_path, provider)
    if result is None:
        return EXIT_FATAL
    if result.failed_rows > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL

