"""
Gemini API key lookup.

The key comes only from the GEMINI_API_KEY environment variable (a .env file
next to the package is loaded first). It is never returned by the API in
full: status reports carry a masked form.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))


GEMINI_KEY_ENV = "GEMINI_API_KEY"


class KeyStatus(BaseModel):
    env_var: str = GEMINI_KEY_ENV
    configured: bool
    masked_key: Optional[str] = None


def get_gemini_key() -> Optional[str]:
    """Current Gemini key, or None when unset or blank."""
    return os.getenv(GEMINI_KEY_ENV, "").strip() or None


def mask_key(key: str) -> str:
    # Keys of 8 characters or fewer are hidden entirely
    if len(key) > 8:
        return f"{key[:4]}...{key[-4:]}"
    return "***"


def gemini_key_status() -> KeyStatus:
    key = get_gemini_key()
    return KeyStatus(configured=key is not None, masked_key=mask_key(key) if key else None)
