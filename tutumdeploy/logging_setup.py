"""CLI logging setup: plain %(message)s output on stdout."""

import logging
import sys

from tutumdeploy.redact import SecretRedactingFilter


def setup_cli_logging(verbose=False):
    """Configure the root logger for CLI use.

    Output looks like print(); ``--verbose`` lowers the level to DEBUG so
    raw command output is shown as well. Secrets are masked by the
    redacting filter on the handler.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
