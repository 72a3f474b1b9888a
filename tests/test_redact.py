"""Tests for tutumdeploy.redact — credential masking in log records."""

import logging

from tutumdeploy.logging_setup import setup_cli_logging
from tutumdeploy.redact import SecretRedactingFilter


def _record(msg, args=None):
    return logging.LogRecord("tutumdeploy", logging.INFO, __file__, 1, msg, args, None)


def _filtered(environ, msg, args=None):
    record = _record(msg, args)
    assert SecretRedactingFilter(environ).filter(record) is True
    return record.getMessage()


def test_masks_api_key():
    env = {"TUTUM_APIKEY": "apikey_SuperSecret123"}
    assert _filtered(env, "~ $ tutum login --apikey apikey_SuperSecret123") == "~ $ tutum login --apikey ***"


def test_short_values_ignored():
    env = {"TUTUM_APIKEY": "short"}
    assert _filtered(env, "Key is short and stays") == "Key is short and stays"


def test_no_secrets_passes_through():
    assert _filtered({}, "Stack yniche-linkedin-auth created.") == "Stack yniche-linkedin-auth created."


def test_masks_multiple_values():
    env = {"TUTUM_APIKEY": "apikey_AAAA", "DOCKER_PASSWORD": "docker_pw_BBBB_long"}
    assert _filtered(env, "KEY=apikey_AAAA PW=docker_pw_BBBB_long done") == "KEY=*** PW=*** done"


def test_longer_secret_masked_whole():
    env = {"TUTUM_AUTH": "ApiKey user:abcdefgh1234", "TUTUM_APIKEY": "abcdefgh1234"}
    assert _filtered(env, "auth=ApiKey user:abcdefgh1234") == "auth=***"


def test_masks_percent_args():
    env = {"DOCKER_PASSWORD": "docker_pw_secret"}
    assert _filtered(env, "password=%s retries=%d", ("docker_pw_secret", 3)) == "password=*** retries=3"


def test_masks_dict_args():
    env = {"DOCKER_PASSWORD": "docker_pw_secret"}
    assert _filtered(env, "password=%(pw)s", ({"pw": "docker_pw_secret"},)) == "password=***"


def test_cli_handler_masks_failed_command(monkeypatch, capsys):
    monkeypatch.setenv("TUTUM_APIKEY", "apikey_SuperSecret123")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    setup_cli_logging()
    try:
        logging.getLogger("tutumdeploy.commands.deploy").error(
            "! Command failed (exit 1): tutum --apikey apikey_SuperSecret123 stack list"
        )
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
    assert capsys.readouterr().out == "! Command failed (exit 1): tutum --apikey *** stack list\n"
