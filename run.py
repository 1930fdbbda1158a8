"""CLI entrypoint."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv as _load_dotenv

from nearby import config
from nearby.errors import InvalidSearchRequest, ProviderError
from nearby.models import RawRecord
from nearby.overpass_client import parse_overpass_response
from nearby.pipeline import render_summary
from nearby.reporting import write_outputs
from nearby.service import search_nearby

logger = logging.getLogger("run")


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)
    overpass_url = os.environ.get("OVERPASS_URL")
    if overpass_url:
        config.OVERPASS_URL = overpass_url


class FileRecordSource:
    """Serves records from a saved Overpass JSON response instead of the network."""

    def __init__(self, path: str) -> None:
        self.path = path

    def fetch(self, lat: float, lon: float, radius: int) -> List[RawRecord]:
        with open(self.path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return parse_overpass_response(payload)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find nearby healthcare, transport and education services")
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--radius", type=int, default=None, help="Search radius in meters (default: 2000)")
    parser.add_argument("--input", type=str, default=None, help="Saved Overpass JSON response to use instead of the API")
    parser.add_argument("--config", type=str, default=None, help="Path to search_config.json")
    parser.add_argument(
        "--dedup-prefer-quality",
        action="store_true",
        help="Keep the higher-scoring member of near-duplicate places instead of the first seen",
    )
    parser.add_argument("--out", type=str, default=config.OUTPUT_DIR)
    parser.add_argument("--no-write", action="store_true", help="Print the summary without writing files")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    load_env()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.config:
        if not config.load_search_config(args.config):
            print(f"Config file not found: {args.config}", file=sys.stderr)
            return 2
    else:
        config.load_search_config()

    client = FileRecordSource(args.input) if args.input else None
    pipeline_cfg = config.pipeline_config(dedup_prefer_quality=args.dedup_prefer_quality)

    try:
        result = search_nearby(
            args.lat, args.lon, args.radius, client=client, pipeline_config=pipeline_cfg
        )
    except InvalidSearchRequest as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return 2
    except ProviderError as exc:
        print(f"Failed to fetch places: {exc}", file=sys.stderr)
        return 1

    summary_lines = render_summary(result)
    if not args.no_write:
        paths = write_outputs(result, summary_lines, args.out)
        logger.info("Results written to %s", paths["places"])

    print("\n".join(summary_lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
