"""Deploy command: tutumdeploy deploy <stack>/<service>."""

import asyncio
import dataclasses
import logging
import sys

from tutumdeploy.config import load_config
from tutumdeploy.deploy.orchestrate import deploy
from tutumdeploy.deploy.params import build_params
from tutumdeploy.errors import DeployError

logger = logging.getLogger(__name__)


def handle_deploy(args):
    """Handle the deploy command."""
    try:
        config = load_config(args.config)
        overrides = {"strict": args.strict or config.strict, "probe": config.probe and not args.no_probe}
        if args.template_dir:
            overrides["template_dir"] = args.template_dir
        config = dataclasses.replace(config, **overrides)

        params = build_params(args.target, config, dry_run=args.dry_run)
        asyncio.run(deploy(params, config))
    except DeployError as e:
        logger.error(f"! {e}")
        sys.exit(1)


def register_deploy_command(subparsers):
    """Register the deploy subcommand."""
    parser = subparsers.add_parser("deploy", help="Deploy a branch stack and link it to the load balancer")
    parser.add_argument("target", help="Deployed service as <stack>/<service>, e.g. linkedin-auth/staging-web")
    parser.add_argument("--config", default=None, help="YAML config overrides (default: ./tutumdeploy.yaml if present)")
    parser.add_argument("--template-dir", default=None, help="Directory holding the *.template.yml files")
    parser.add_argument("--strict", action="store_true", help="Fail on any placeholder without an explicit value")
    parser.add_argument("--no-probe", action="store_true", help="Skip the HTTP probe of the deployed endpoint")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")
    parser.set_defaults(func=handle_deploy)
