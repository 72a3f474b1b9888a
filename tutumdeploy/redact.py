"""Log filter that masks Tutum and registry credentials."""

import logging
import os
import re

# Env vars holding credentials the tutum CLI picks up
SECRET_ENV_VARS = ("TUTUM_APIKEY", "TUTUM_AUTH", "DOCKER_PASSWORD")

MIN_SECRET_LENGTH = 8  # shorter values match too much ordinary text

MASK = "***"


class SecretRedactingFilter(logging.Filter):
    """Replace credential values with '***' in every record passing through.

    Secrets are read from the environment once, when the filter is created.
    """

    def __init__(self, environ=None):
        super().__init__()
        environ = os.environ if environ is None else environ
        secrets = {environ.get(var, "") for var in SECRET_ENV_VARS}
        secrets = sorted((s for s in secrets if len(s) >= MIN_SECRET_LENGTH), key=len, reverse=True)
        # Longest first so a secret containing another one is masked whole
        self._pattern = re.compile("|".join(re.escape(s) for s in secrets)) if secrets else None

    def _mask(self, value):
        return self._pattern.sub(MASK, value) if isinstance(value, str) else value

    def filter(self, record):
        if self._pattern is None:
            return True
        record.msg = self._mask(str(record.msg))
        if isinstance(record.args, dict):
            record.args = {k: self._mask(v) for k, v in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(self._mask(a) for a in record.args)
        return True
