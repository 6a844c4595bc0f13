import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

DATA_DIR = Path(os.getenv("IXTRACT_DATA_DIR", BASE_DIR / "data"))
OUTPUT_DIR = Path(os.getenv("IXTRACT_OUTPUT_DIR", BASE_DIR / "output"))
LOG_DIR = Path(os.getenv("IXTRACT_LOG_DIR", BASE_DIR / "logs"))

FILINGS_DIR = DATA_DIR / "filings"

ALL_DIRS = [
    DATA_DIR, OUTPUT_DIR, LOG_DIR,
    FILINGS_DIR,
]

def ensure_dirs():
    for d in ALL_DIRS:
        d.mkdir(parents=True, exist_ok=True)
