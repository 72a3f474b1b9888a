#!/usr/bin/env python3
"""Tutum stack deploy tool — CLI entrypoint."""

import argparse

from tutumdeploy.commands.deploy import register_deploy_command
from tutumdeploy.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Deploy branch stacks to Tutum")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show raw command output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_deploy_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
