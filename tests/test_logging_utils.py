"""Tests for logging level resolution."""

import argparse
import logging

from logging_utils import TqdmLoggingHandler, add_logging_args, resolve_log_level


def test_default_is_info():
    assert resolve_log_level() == logging.INFO


def test_explicit_level_wins():
    assert resolve_log_level("error", verbose=2) == logging.ERROR


def test_verbose_and_quiet_balance():
    assert resolve_log_level(verbose=1) == logging.DEBUG
    assert resolve_log_level(quiet=1) == logging.WARNING
    assert resolve_log_level(quiet=2) == logging.ERROR
    assert resolve_log_level(verbose=1, quiet=1) == logging.INFO


def test_parser_flags():
    parser = argparse.ArgumentParser()
    add_logging_args(parser)
    args = parser.parse_args(["-vv", "--log-level", "warning"])
    assert args.verbose == 2
    assert args.log_level == "warning"


def test_tqdm_handler_writes_formatted_record(capsys):
    handler = TqdmLoggingHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    handler.emit(logging.makeLogRecord({"msg": "hello", "levelname": "INFO"}))
    assert capsys.readouterr().out == "INFO hello\n"
