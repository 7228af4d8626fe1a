#!/usr/bin/env python3
"""
CLI script: interactively deploy functions, endpoints and events, and remove
endpoints that are deployed to API Gateway but no longer defined locally.

Must be run from a terminal; stage and region are prompted for when not given.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Allow running from project root: python scripts/dash_deploy.py
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import boto3
from botocore.exceptions import BotoCoreError

from dashdeploy.command import DashDeployRequest, run_command
from dashdeploy.config import get_page_limit, get_project_path
from dashdeploy.dispatch import DeploymentOutcome
from dashdeploy.errors import DashDeployError, DispatchError
from dashdeploy.project import load_project

SECTIONS = (
    ("deployed_functions", "Deployed functions"),
    ("deployed_endpoints", "Deployed endpoints"),
    ("deployed_events", "Deployed events"),
    ("removed_endpoints", "Removed endpoints"),
)


def print_outcome(outcome: DeploymentOutcome) -> None:
    data = outcome.to_dict()
    if not any(data.values()):
        print("Nothing was deployed.")
        return
    for key, title in SECTIONS:
        if not data[key]:
            continue
        print(f"{title} ({len(data[key])}):")
        for name in data[key]:
            print(f"  - {name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serverless dashboard - deploys code, endpoints and events, removes orphaned endpoints."
    )
    parser.add_argument("--stage", "-s", default=None, help="Optional if only one stage is defined in project.")
    parser.add_argument("--region", "-r", default=None, help="Optional - target one region to deploy to.")
    parser.add_argument("--alias-function", "-f", default=None, help="Optional - custom alias for your functions.")
    parser.add_argument("--alias-endpoint", "-e", default=None, help="Optional - custom alias for your endpoints.")
    parser.add_argument(
        "--alias-rest-api",
        "-a",
        default=None,
        help="Optional - custom API Gateway stage variable for your REST API.",
    )
    parser.add_argument(
        "--description",
        "-d",
        default=None,
        help="Optional - description for the API Gateway stage deployment.",
    )
    parser.add_argument("--project", default=None, help="Project file (default: $DASH_PROJECT_PATH or ./project.yml).")
    parser.add_argument("--profile", default=None, help="AWS profile name (optional).")
    parser.add_argument(
        "--output",
        choices=("table", "json"),
        default="table",
        help="Output format: table (human) or json.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Fail fast on bad settings, before any prompt
    try:
        get_page_limit()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    request = DashDeployRequest(
        stage=args.stage,
        region=args.region,
        alias_function=args.alias_function,
        alias_endpoint=args.alias_endpoint,
        alias_rest_api=args.alias_rest_api,
        description=args.description,
    )

    try:
        session = boto3.Session(profile_name=args.profile) if args.profile else None
        project = load_project(get_project_path(args.project))
        outcome = run_command("dash deploy", request, project=project, session=session)
    except DispatchError as e:
        print(f"Error: {e}")
        print("Completed before the failure:")
        print_outcome(e.outcome)
        return 1
    except (DashDeployError, BotoCoreError) as e:
        print(f"Error: {e}")
        return 1

    if args.output == "json":
        print(json.dumps(outcome.to_dict(), indent=2, default=str))
        return 0
    print()
    print_outcome(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
