# scripts/run_search.py
from job_aggregator.main import main


if __name__ == "__main__":
    raise SystemExit(main())
