"""Deploy library: variables, template rendering, stack deploys, load balancer links."""

from tutumdeploy.deploy.links import (
    compute_links,
    derive_links,
    discover_links,
    format_links,
    make_link,
    merge_links,
)
from tutumdeploy.deploy.orchestrate import deploy, run_deploy
from tutumdeploy.deploy.params import DeployParams, build_params, parse_target
from tutumdeploy.deploy.stack import deploy_stack, find_stack, validate_locked_tags
from tutumdeploy.deploy.template import render_stackfile, render_template
from tutumdeploy.deploy.variables import VariableStore, build_variable_store

__all__ = [
    "DeployParams",
    "VariableStore",
    "build_params",
    "build_variable_store",
    "compute_links",
    "deploy",
    "deploy_stack",
    "derive_links",
    "discover_links",
    "find_stack",
    "format_links",
    "make_link",
    "merge_links",
    "parse_target",
    "render_stackfile",
    "render_template",
    "run_deploy",
    "validate_locked_tags",
]
