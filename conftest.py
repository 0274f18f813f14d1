import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test output quiet unless asked otherwise
os.environ.setdefault("LOG_LEVEL", "WARNING")
