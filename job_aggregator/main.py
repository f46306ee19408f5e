# job_aggregator/main.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from job_aggregator.api import search
from job_aggregator.config import load_config


def _load_query_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Query file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"Query must be a mapping (dict): {path}")
    return data


def run(query_path: str, config_path: Optional[str] = None) -> int:
    cfg = load_config(config_path)
    logging.basicConfig(
        level=cfg.logging.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    query = _load_query_file(Path(query_path).expanduser().resolve())
    status, payload = search(query, settings=cfg)

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    logging.getLogger(__name__).info("Search finished with status %d", status)
    return 0 if payload.get("ok") else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Search job boards (Greenhouse / Lever / Ashby).")
    parser.add_argument("--query", required=True, help="JSON or YAML query file")
    parser.add_argument("--config", default=None, help="YAML settings file")
    args = parser.parse_args(argv)
    return run(args.query, args.config)


if __name__ == "__main__":
    raise SystemExit(main())
