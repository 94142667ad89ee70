"""Mark evaluations stuck in 'processing' as failed.

A worker that dies mid-evaluation leaves its record in 'processing' and the
job is not redelivered. Run this by hand (or from cron) to close such records
so clients polling them see a terminal status and can resubmit.

Usage:
  python scripts/fail_stale_evaluations.py [--minutes N]
"""

import argparse
import os
import sys
from datetime import timedelta

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from cv_evaluator import create_app
from cv_evaluator.services.evaluation_store import fail_stale_processing


def main():
    app = create_app()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--minutes", type=int, default=app.config.get("STALE_PROCESSING_MINUTES", 30))
    args = parser.parse_args()

    with app.app_context():
        ids = fail_stale_processing(timedelta(minutes=args.minutes))
    if ids:
        print('Marked failed:', ids)
    else:
        print('No stale evaluations.')


if __name__ == '__main__':
    main()
