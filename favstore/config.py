"""Runtime settings for the REST backend, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class ApiSettings:
    api_url: str = field(default_factory=lambda: os.getenv("FAVSTORE_API_URL", "http://localhost:3001"))
    user_id: int = field(default_factory=lambda: int(os.getenv("FAVSTORE_USER_ID", "1")))
    timeout_ms: float = field(default_factory=lambda: float(os.getenv("FAVSTORE_TIMEOUT_MS", "5000")))
    retries: int = field(default_factory=lambda: int(os.getenv("FAVSTORE_RETRIES", "3")))

    # Read-cache lifetimes (seconds)
    resources_ttl: float = 600.0
    frequently_visited_ttl: float = 300.0
    user_favorites_ttl: float = 60.0


settings = ApiSettings()
