"""
Global settings for the multicall reader
"""
import os
from typing import Final

from dotenv import load_dotenv

load_dotenv()

# Logging level
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

# Request timeout in seconds (single batched eth_call)
REQUEST_TIMEOUT: Final[float] = float(os.getenv("REQUEST_TIMEOUT", "20.0"))

# Recent blocks not trusted as canonical yet; subtracted from the head
BLOCK_SAFETY_MARGIN: Final[int] = int(os.getenv("BLOCK_SAFETY_MARGIN", "10"))

# Multicall3 is deployed at the same address on every supported chain
MULTICALL3_ADDRESS: Final[str] = os.getenv(
    "MULTICALL3_ADDRESS", "0xcA11bde05977b3631167028862bE2a173976CA11"
)
