import os

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = os.getenv("GRADEBOOK_DATA_DIR", "data")
STORAGE = os.getenv("GRADEBOOK_STORAGE", "file").strip().lower()
LOG_LEVEL = os.getenv("GRADEBOOK_LOG_LEVEL", "INFO").strip().upper()
PORT = int(os.getenv("PORT", 8000))

if STORAGE not in ("file", "memory"):
    raise RuntimeError("GRADEBOOK_STORAGE must be 'file' or 'memory'")
