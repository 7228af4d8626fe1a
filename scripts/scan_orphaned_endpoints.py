#!/usr/bin/env python3
"""
CLI script to list API Gateway endpoints deployed for a stage/region that no
local function defines any more. Read-only; works without a terminal.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Allow running from project root: python scripts/scan_orphaned_endpoints.py
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import boto3
from botocore.exceptions import BotoCoreError

from dashdeploy.config import get_page_limit, get_project_path
from dashdeploy.errors import DashDeployError
from dashdeploy.inventory import fetch_deployed_api
from dashdeploy.orphans import orphan_report
from dashdeploy.project import list_local_functions, load_project


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="List deployed API Gateway endpoints with no local definition."
    )
    parser.add_argument("--stage", "-s", required=True, help="Stage to inspect.")
    parser.add_argument("--region", "-r", required=True, help="Region in the stage to inspect.")
    parser.add_argument("--project", default=None, help="Project file (default: $DASH_PROJECT_PATH or ./project.yml).")
    parser.add_argument("--profile", default=None, help="AWS profile name (optional).")
    parser.add_argument(
        "--output",
        choices=("table", "json"),
        default="table",
        help="Output format: table (human) or json.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING)

    try:
        session = boto3.Session(profile_name=args.profile) if args.profile else None
        project = load_project(get_project_path(args.project))
        api = fetch_deployed_api(
            project, args.stage, args.region, session=session, page_limit=get_page_limit()
        )
    except (DashDeployError, BotoCoreError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    results = orphan_report(list_local_functions(project), api)

    if args.output == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return 0

    # Table output
    if not results:
        print(f"[{args.region}] No orphaned endpoints in REST API {api.name} ({api.id}).")
        return 0
    print(f"[{args.region}] {len(results)} orphaned endpoint(s) in REST API {api.name} ({api.id}):")
    for r in results:
        print(f"  - {r.method:<7} {r.path_part}  (function: {r.function})")
        print(f"    {r.console_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
