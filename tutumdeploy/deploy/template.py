"""Stack template rendering: YAML round-trip plus <%= NAME %> substitution."""

import logging
import os
import re

import yaml

from tutumdeploy.deploy.links import LINKS_VARIABLE
from tutumdeploy.errors import TemplateError, TemplateNotFoundError, UnsupportedKeyError

logger = logging.getLogger(__name__)

# Top-level key used for YAML anchors/documentation only; never deployed
RESERVED_KEY = "defaults"

PLACEHOLDER_RE = re.compile(r"<%=\s*(?P<name>\w+)\s*%>")

# Variables holding a YAML flow sequence; a scalar made of just one of these
# placeholders becomes the sequence itself.
LIST_VARIABLES = frozenset({LINKS_VARIABLE})


class _StackDumper(yaml.SafeDumper):
    """Safe dumper that writes merged `<<: *defaults` values out in full instead of as aliases."""

    def ignore_aliases(self, data):
        return True


def load_template(template_path) -> dict:
    """Parse a stack template and drop the reserved ``defaults`` key."""
    if not os.path.isfile(template_path):
        raise TemplateNotFoundError(f"Template not found: {template_path}")

    try:
        with open(template_path, encoding="utf-8") as f:
            definition = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise TemplateError(f"Error reading {template_path}: not valid UTF-8 ({e.reason} at byte {e.start})") from None
    except yaml.YAMLError as e:
        raise TemplateError(f"Error parsing {template_path}: {e}") from None

    if not isinstance(definition, dict):
        raise TemplateError(f"{template_path} must contain a mapping of services.")

    definition.pop(RESERVED_KEY, None)
    return definition


def substitute(text, store, template_path=None):
    """Replace every placeholder in text with its value from the store."""

    def _replace(match):
        try:
            return store.resolve(match.group("name"))
        except UnsupportedKeyError as e:
            raise UnsupportedKeyError(e.key, template_path) from None

    return PLACEHOLDER_RE.sub(_replace, text)


def _expand_list(name, text, store, template_path):
    value = substitute(text, store, template_path)
    try:
        items = yaml.safe_load(value)
    except yaml.YAMLError as e:
        raise TemplateError(f"{name} in {template_path} is not a YAML list: {e}") from None
    if not isinstance(items, list):
        raise TemplateError(f"{name} in {template_path} is not a YAML list: {value}")
    return items


def expand_placeholders(node, store, template_path=None):
    """Substitute placeholders in every string key and value of a parsed template.

    Substituted values stay strings, so the dumper quotes anything YAML would
    otherwise read as a number or boolean. A value that is exactly one
    list variable placeholder is replaced by the list.
    """
    if isinstance(node, dict):
        return {
            expand_placeholders(key, store, template_path): expand_placeholders(value, store, template_path)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [expand_placeholders(item, store, template_path) for item in node]
    if isinstance(node, str):
        match = PLACEHOLDER_RE.fullmatch(node.strip())
        if match and match.group("name") in LIST_VARIABLES:
            return _expand_list(match.group("name"), node, store, template_path)
        return substitute(node, store, template_path)
    return node


def render_template(template_path, store) -> str:
    """Render a stack template into the stackfile text handed to the tutum CLI."""
    definition = load_template(template_path)
    logger.info(f"Rendering {template_path}:")
    definition = expand_placeholders(definition, store, template_path)
    # sort_keys=False keeps service order; unbounded width keeps long values on one line
    return yaml.dump(definition, Dumper=_StackDumper, sort_keys=False, default_flow_style=False, width=float("inf"))


async def render_stackfile(template_path, output_path, store, write_file):
    """Render template_path and write the result to output_path."""
    content = render_template(template_path, store)
    await write_file(output_path, content)
    return content
