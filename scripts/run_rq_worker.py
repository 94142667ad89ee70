"""Run the evaluation RQ worker inside the Flask app context.

Usage:
  source .venv/bin/activate
  export OBJC_DISABLE_INITIALIZE_FORK_SAFETY=YES   # macOS fork safety if needed
  python scripts/run_rq_worker.py [--burst]

Only one worker should consume the evaluation queue; jobs are processed one
at a time in the order they were published.
"""

import argparse
import os
import sys

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from cv_evaluator import create_app
from cv_evaluator.extensions import evaluation_queue


def main():
    parser = argparse.ArgumentParser(description="cv-evaluator evaluation worker")
    parser.add_argument("--burst", action="store_true", help="process queued jobs and exit")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        print('evaluation worker starting (pid', os.getpid(), ')')
        try:
            evaluation_queue.subscribe(burst=args.burst)
        finally:
            print('evaluation worker exiting (pid', os.getpid(), ')')


if __name__ == '__main__':
    main()
