"""
Run the lms-schedule command line straight from a source checkout.

    python main.py generate --start 2024-09-03 --count 7
    python main.py cadence --roster data/sample_roster.json

An installed copy exposes the same commands as `lms-schedule`.
"""
import sys
from pathlib import Path

_src = Path(__file__).parent / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from lms_schedule.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
