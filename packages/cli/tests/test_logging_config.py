"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from revping_cli.logging_config import setup_logging


def test_uses_rich_handler_and_env_level(mocker, monkeypatch):
    monkeypatch.setenv("REVPING_LOG_LEVEL", "debug")
    basic_config = mocker.patch("revping_cli.logging_config.logging.basicConfig")

    setup_logging()

    kwargs = basic_config.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    assert isinstance(kwargs["handlers"][0], RichHandler)


def test_unknown_level_falls_back_to_info(mocker, monkeypatch):
    monkeypatch.setenv("REVPING_LOG_LEVEL", "chatty")
    basic_config = mocker.patch("revping_cli.logging_config.logging.basicConfig")

    setup_logging()

    assert basic_config.call_args.kwargs["level"] == logging.INFO
