"""
Runtime settings for the API server and command line.
The pipeline itself never reads the environment; callers pass these in.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def parse_sizes(raw: str) -> list[int]:
    """'64, 32,16' -> [64, 32, 16]. Blank entries are ignored."""
    sizes = []
    for part in (raw or "").replace(";", ",").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            sizes.append(int(part))
        except ValueError:
            raise ValueError(f"Invalid target size {part!r} in {raw!r}") from None
    return sizes


TARGET_SIZES = parse_sizes(os.getenv("TARGET_SIZES", "64,32,16"))
FAILURE_POLICY = os.getenv("FAILURE_POLICY", "abort")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "data/resized")
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
MAX_TARGET_SIZE = int(os.getenv("MAX_TARGET_SIZE", "1024"))
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5000"))
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()

LOG_FORMAT = '%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'
