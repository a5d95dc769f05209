"""
Main entry point for resquin.

This module provides the command line interface: compute indicators for a
CSV file of responses, or serve the HTTP API.
"""

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from resquin.components.config import Config, load_config_file
from resquin.errors import ResquinError
from resquin.math.indicators import resp_distributions, resp_styles


def setup_logging(level: str = 'WARNING') -> None:
    """
    Set up logging.

    Args:
        level: Logging level
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Survey response quality indicators')

    parser.add_argument(
        '--config',
        help='Path to configuration file (JSON or YAML)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    # Shared options for the indicator commands
    data_parser = argparse.ArgumentParser(add_help=False)
    data_parser.add_argument('input', help='CSV file, one row per respondent')
    data_parser.add_argument(
        '--columns',
        help='Comma-separated item columns to use (default: all)'
    )
    data_parser.add_argument(
        '--min-valid-responses',
        type=float,
        help='Share of valid responses a respondent needs, between 0 and 1'
    )
    data_parser.add_argument(
        '--output', '-o',
        help='Output CSV file (default: stdout)'
    )

    styles = subparsers.add_parser(
        'styles', parents=[data_parser], help='Compute response style indicators'
    )
    styles.add_argument('--scale-min', type=float, required=True, help='Lowest response option')
    styles.add_argument('--scale-max', type=float, required=True, help='Highest response option')
    styles.add_argument(
        '--no-normalize',
        dest='normalize',
        action='store_false',
        default=None,
        help='Report counts instead of proportions'
    )

    subparsers.add_parser(
        'distributions', parents=[data_parser], help='Compute response distribution indicators'
    )

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--port', type=int, help='Server port')
    serve.add_argument('--host', help='Server host')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """
    Build a fresh configuration from file and command line overrides.

    Each call starts again from defaults and the environment.

    Args:
        args: Parsed arguments

    Returns:
        Config instance
    """
    overrides = {}

    # Load configuration from file if provided
    if args.config:
        overrides.update(load_config_file(args.config))

    # Override with command line arguments
    if args.log_level:
        overrides.setdefault('logging', {})['level'] = args.log_level.lower()

    if getattr(args, 'min_valid_responses', None) is not None:
        overrides.setdefault('indicators', {})['min-valid-responses'] = args.min_valid_responses

    if getattr(args, 'normalize', None) is not None:
        overrides.setdefault('indicators', {})['normalize'] = args.normalize

    if getattr(args, 'port', None):
        overrides.setdefault('server', {})['port'] = args.port

    if getattr(args, 'host', None):
        overrides.setdefault('server', {})['host'] = args.host

    return Config(overrides)


def read_responses(path: str, columns: Optional[str] = None) -> pd.DataFrame:
    """
    Read a CSV file of responses.

    Args:
        path: CSV file path
        columns: Comma-separated column names to keep

    Returns:
        DataFrame with NaN for empty cells
    """
    data = pd.read_csv(path)
    if columns:
        names = [name.strip() for name in columns.split(',') if name.strip()]
        missing = [name for name in names if name not in data.columns]
        if missing:
            raise ValueError(f"Columns not found in {path}: {', '.join(missing)}")
        data = data[names]
    return data


def run_indicators(args: argparse.Namespace, config: Config) -> pd.DataFrame:
    """
    Compute the indicator table requested on the command line.

    Args:
        args: Parsed arguments
        config: Configuration

    Returns:
        Indicator table
    """
    data = read_responses(args.input, args.columns)
    min_valid = config.get('indicators.min-valid-responses', 1.0)

    if args.command == 'styles':
        return resp_styles(
            data,
            args.scale_min,
            args.scale_max,
            min_valid_responses=min_valid,
            normalize=config.get('indicators.normalize', True)
        )
    return resp_distributions(data, min_valid_responses=min_valid)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments, defaults to sys.argv

    Returns:
        Exit status
    """
    args = parse_args(argv)
    config = build_config(args)

    # Set up logging
    setup_logging(config.get('logging.level', 'warning'))

    if args.command == 'serve':
        from resquin.components.server import ServerManager
        ServerManager.get_server(config).run()
        return 0

    try:
        result = run_indicators(args, config)
    except (ResquinError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    result.to_csv(args.output if args.output else sys.stdout, index=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
