#!/usr/bin/env python3
"""
Command-line inspection of XML configuration files.

Examples:
    confstore xml/myConfig.xml thumbnail/width group/innergroup/value1
    confstore xml/myConfig.xml --format json --no-cache
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import yaml

from .config import ConfigError, ConfigStore, FileCacheStorage, LoaderSettings, MemoryCacheStorage
from .utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _format_value(value, fmt: str) -> str:
    # Plain strings print raw in yaml mode; everything else uses JSON literals
    if fmt == 'yaml' and isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _dump(config, fmt: str) -> str:
    data = dict(config)
    if fmt == 'json':
        return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    return yaml.safe_dump(data, sort_keys=True, allow_unicode=True, default_flow_style=False).rstrip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='confstore',
        description='Print values from a hierarchical XML configuration',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('config', type=str, help='Root XML configuration file')
    parser.add_argument('keys', type=str, nargs='*', help='Keys to print (whole map when omitted)')
    parser.add_argument('--default', type=str, default='', help='Printed for absent keys')
    parser.add_argument('--format', type=str, choices=['yaml', 'json'], default='yaml')
    parser.add_argument('--cache-dir', type=str, default=None)
    parser.add_argument('--no-cache', action='store_true', help='Do not read or write the on-disk cache')
    parser.add_argument('--strict', action='store_true', help='Fail on missing sources instead of skipping them')
    parser.add_argument('--verbose', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = LoaderSettings.from_env()
    if args.cache_dir:
        settings.cache_dir = args.cache_dir

    setup_logging(
        log_level='DEBUG' if args.verbose else settings.log_level,
        log_file=settings.log_file,
    )

    cache = MemoryCacheStorage() if args.no_cache else FileCacheStorage(settings.cache_dir)

    try:
        config = ConfigStore(
            args.config,
            cache=cache,
            settings=settings,
            skip_if_missing=False if args.strict else None,
        )
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.keys:
        print(_dump(config.get_all(), args.format))
        return 0

    for key in args.keys:
        value = config.get(key)
        if value is None:
            print(args.default)
        else:
            print(_format_value(value, args.format))
    return 0


if __name__ == '__main__':
    sys.exit(main())
