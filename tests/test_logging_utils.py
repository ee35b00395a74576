import argparse
import logging

import pytest

from logging_utils import add_logging_args, resolve_log_level


@pytest.mark.parametrize("verbose,quiet,expected", [
    (0, 0, logging.WARNING),
    (1, 0, logging.INFO),
    (2, 0, logging.DEBUG),
    (5, 0, logging.DEBUG),
    (0, 1, logging.ERROR),
    (0, 3, logging.ERROR),
    (1, 1, logging.WARNING),
])
def test_offset_levels(verbose, quiet, expected):
    assert resolve_log_level(verbose=verbose, quiet=quiet) == expected


def test_explicit_level_wins():
    assert resolve_log_level("DEBUG", verbose=0, quiet=2) == logging.DEBUG


def test_parser_flags():
    parser = argparse.ArgumentParser()
    add_logging_args(parser)
    args = parser.parse_args(["-vv", "--log-level", "info"])
    assert args.verbose == 2
    assert args.log_level == "info"
