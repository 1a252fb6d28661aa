"""Error payloads returned by the API."""
from __future__ import annotations

from typing import Dict


def api_error(message: str) -> Dict[str, str]:
    return {"message": message}
