"""Variable store for stack template placeholders."""

import logging
import os
import re

from tutumdeploy.errors import UnsupportedKeyError

logger = logging.getLogger(__name__)

LOCKED_TAG_RE = re.compile(r"^LOCKED_(?P<name>[A-Z0-9_]+)_TAG$")

DEFAULT_LOCKED_TAG = "latest"


class VariableStore:
    """Name -> value mapping used to fill ``<%= NAME %>`` placeholders.

    In strict mode every key must be present. In lenient mode a missing
    ``LOCKED_<NAME>_TAG`` key falls back to the environment variable of the
    same name, then to ``default_tag``; the fallback value is cached so that
    ``items()`` and ``locked_tags()`` include it afterwards.
    """

    def __init__(self, values=None, lenient=True, environ=None, default_tag=DEFAULT_LOCKED_TAG):
        self._values = dict(values or {})
        self.lenient = lenient
        self._environ = os.environ if environ is None else environ
        self.default_tag = default_tag

    def resolve(self, key) -> str:
        if not isinstance(key, str) or not key:
            raise ValueError(f"Variable key must be a non-empty string, got {key!r}")

        if key in self._values:
            value = self._values[key]
        else:
            value = self._fallback(key)
            self._values[key] = value

        logger.info(f"  {key} -> {value}")
        return value

    def _fallback(self, key):
        if not self.lenient or not LOCKED_TAG_RE.match(key):
            raise UnsupportedKeyError(key)
        return self._environ.get(key) or self.default_tag

    def bind(self, key, value):
        """Add or replace a late-bound key, e.g. a link list known only after a deploy."""
        self._values[key] = value

    def __contains__(self, key):
        return key in self._values

    def items(self):
        return list(self._values.items())

    def locked_tags(self) -> dict:
        """Return {NAME: tag} for every LOCKED_<NAME>_TAG key held."""
        tags = {}
        for key, value in self._values.items():
            match = LOCKED_TAG_RE.match(key)
            if match:
                tags[match.group("name")] = value
        return tags


def build_variable_store(params, lenient=True, environ=None) -> VariableStore:
    """Seed a store with the deploy target's variables and LOCKED_*_TAG env overrides."""
    environ = os.environ if environ is None else environ
    values = {
        "BRANCH": params.branch,
        "ENVIRONMENT": params.environment,
        "STACK_NAME": params.stack_name,
        "SERVICE_NAME": params.service,
        "SERVICE_LABEL": params.label,
        "IMAGE_TAG": params.image_tag,
    }
    for key, value in environ.items():
        if LOCKED_TAG_RE.match(key) and value:
            values[key] = value

    default_tag = "production" if params.is_production else DEFAULT_LOCKED_TAG
    return VariableStore(values, lenient=lenient, environ=environ, default_tag=default_tag)
