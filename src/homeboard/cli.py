from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .config import ConfigError, load_config
from .dashboard import collect_service_groups, collect_widget_results
from .shortcuts import resolve_shortcut
from .widgets.proxy import HttpTransport


def _print_json(data) -> None:
    json.dump(data, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main() -> None:
    ap = argparse.ArgumentParser(prog="homeboard")
    ap.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("services", help="Print the merged service groups")
    sub.add_parser("widgets", help="Refresh every widget once and print the results")
    shortcut = sub.add_parser("shortcut", help="Resolve a shortcut id into a redirect")
    shortcut.add_argument("id")
    args = ap.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
    except (OSError, ConfigError) as e:
        ap.exit(2, f"homeboard: {e}\n")

    if args.command == "services":
        forest = asyncio.run(collect_service_groups(cfg))
        _print_json([g.to_dict() for g in forest])
    elif args.command == "widgets":
        transport = HttpTransport(timeout=cfg.http_timeout, verify=cfg.http_verify)
        forest = asyncio.run(collect_service_groups(cfg))
        reports = asyncio.run(collect_widget_results(forest, transport))
        _print_json([r.to_dict() for r in reports])
    else:
        response = asyncio.run(resolve_shortcut(args.id, "GET", cfg, lambda: collect_service_groups(cfg)))
        _print_json(response.to_dict())
        if response.status >= 400:
            sys.exit(1)


if __name__ == "__main__":
    main()
