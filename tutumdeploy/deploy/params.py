"""Deploy parameters dataclass."""

import os
from dataclasses import dataclass

from tutumdeploy.config import DeployConfig
from tutumdeploy.errors import UsageError


@dataclass
class DeployParams:
    """Everything derived from the ``stack/service`` target for one deploy run."""

    branch: str  # e.g. linkedin-auth
    service: str  # e.g. staging-web
    environment: str  # staging or production
    stack_name: str  # e.g. yniche-linkedin-auth
    solo_stack: str  # shared stack hosting the load balancer
    lb_service: str
    stack_template: str
    stack_file: str
    solo_template: str
    solo_file: str
    dry_run: bool = False

    @property
    def service_prefix(self) -> str:
        """Prefix stripped from service names to get their link label."""
        return f"{self.environment}-"

    @property
    def label(self) -> str:
        return strip_prefix(self.service, self.service_prefix)

    @property
    def image_tag(self) -> str:
        return "latest" if self.branch == "master" else self.branch

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def strip_prefix(name, prefix):
    return name[len(prefix):] if name.startswith(prefix) else name


def parse_target(target):
    """Split a ``stack/service`` command line target into its two parts."""
    parts = target.split("/")
    if len(parts) != 2 or not all(parts):
        raise UsageError(f"Expected <stack>/<service>, got '{target}'.")
    return parts[0], parts[1]


def build_params(target, config: DeployConfig, dry_run=False) -> DeployParams:
    """Resolve stack names and file paths for a deploy target."""
    branch, service = parse_target(target)

    if branch == config.production_branch:
        environment = "production"
        stack_name = f"{config.stack_prefix}-production"
    else:
        environment = "staging"
        stack_name = f"{config.stack_prefix}-{branch}"

    template_dir = config.template_dir
    return DeployParams(
        branch=branch,
        service=service,
        environment=environment,
        stack_name=stack_name,
        solo_stack=f"{config.stack_prefix}-{environment}-solo",
        lb_service=f"{environment}-lb",
        stack_template=os.path.join(template_dir, f"{environment}.stack.template.yml"),
        stack_file=os.path.join(template_dir, f"{stack_name}.yml"),
        solo_template=os.path.join(template_dir, f"{environment}.solo.template.yml"),
        solo_file=os.path.join(template_dir, f"{environment}.solo.yml"),
        dry_run=dry_run,
    )
