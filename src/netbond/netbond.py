# SPDX-License-Identifier: BSD-2-Clause

import argparse
import logging
import os
import sys

import toml
from rich.logging import RichHandler

from netbond.config import ArpMonConfig, BondConfig, MiiMonConfig
from netbond.errors import ConfigError, ConfigParseError
from netbond.netconfig import NetConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Validate bond device declarations in a network config')

    parser.add_argument('--debug', '-D', action='store_true', default=False,
                        help='Enable debug logging')

    parser.add_argument('--config', '-c', required=True,
                        help='Path to network config file')

    return parser.parse_args(argv)


def setup_logging(debug: bool, color: bool):
    if color:
        handlers = [RichHandler(enable_link_path=False)]
        log_format = '%(message)s'
    else:
        handlers = [RichHandler(show_path=False, omit_repeated_times=False)]
        log_format = '%(filename)s:%(lineno)s %(levelname)s: %(message)s'

    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO,
                        format=log_format,
                        datefmt='[%Y-%m-%d %H:%M:%S]',
                        handlers=handlers)


def read_config(config_file: str) -> NetConfig:
    try:
        with open(config_file, 'r', encoding='utf-8') as infile:
            raw_config = toml.load(infile)
    except toml.TomlDecodeError as e:
        raise ConfigParseError(f"{config_file}: invalid TOML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"{config_file}: cannot read config: {e}") from e
    logging.debug(f"Read {len(raw_config)} top-level keys from {config_file}")
    return NetConfig.from_document(raw_config)


def describe_bond(name: str, bond: BondConfig) -> str:
    match bond.monitoring_config:
        case MiiMonConfig(frequency=frequency):
            monitoring = f"miimon every {frequency}ms"
        case ArpMonConfig(interval=interval, targets=targets):
            monitoring = f"arpmon every {interval}ms to {len(targets)} targets"
        case _:
            raise ValueError(f"Unexpected monitoring type: {type(bond.monitoring_config)}")

    return f"Bond '{name}': {bond.mode.value} over {', '.join(bond.interfaces)}, {monitoring}"


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(debug=args.debug,
                  color=os.isatty(sys.stdout.fileno()))

    try:
        config = read_config(args.config)
        config.validate_config()
    except ConfigError as e:
        logging.error(f"Invalid network config {args.config}: {e}")
        return 1

    for name, bond in config.devices.items():
        logging.info(describe_bond(name, bond))

    return 0


if __name__ == '__main__':
    sys.exit(main())
