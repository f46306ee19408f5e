import sys

import requests
import yaml

from job_aggregator.errors import ConfigurationError
from job_aggregator.sources import ashby, greenhouse, lever, resolve_org

CONFIG_PATH = sys.argv[1] if len(sys.argv) > 1 else "config/query.example.yaml"

LIST_URLS = {
    "greenhouse": lambda org: f"{greenhouse.API_BASE}/{org}/jobs",
    "lever": lambda org: f"{lever.API_BASE}/{org}?mode=json",
    "ashby": lambda org: f"{ashby.API_BASE}/{org}",
}


def main():
    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    sources = cfg.get("sources", []) if isinstance(cfg, dict) else []

    ok, bad = [], []
    for s in sources:
        if not isinstance(s, dict):
            continue
        kind = str(s.get("type", "")).strip().lower()
        url = str(s.get("url", "")).strip()
        try:
            org = resolve_org(kind, url)
        except ConfigurationError as e:
            bad.append((url, str(e)))
            print(f"[CFG]  {url} -> {e}")
            continue

        try:
            r = requests.get(LIST_URLS[kind](org), timeout=20)
            if r.status_code == 200:
                ok.append(url)
                print(f"[OK]   {kind}:{org}")
            else:
                bad.append((url, r.status_code))
                print(f"[BAD]  {kind}:{org} -> {r.status_code}")
        except requests.RequestException as e:
            bad.append((url, str(e)))
            print(f"[ERR]  {kind}:{org} -> {e}")

    print(f"\n{len(ok)} valid, {len(bad)} invalid")
    return 0 if not bad else 1


if __name__ == "__main__":
    raise SystemExit(main())
