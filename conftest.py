"""Makes the src/ layout importable for the test suite without an install."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))
