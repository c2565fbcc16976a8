"""
Application Configuration

Settings are read from ``SPTZX_*`` environment variables. Unparseable
numeric values fall back to their defaults.
"""

import os
from typing import Tuple

DEFAULT_SECRET_KEY = "sptzx-change-me-in-production"

# Allowance for multipart framing on top of the file size limit
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class AppConfig:
    """Application configuration."""

    def __init__(self, **overrides):
        self.secret_key = os.getenv("SPTZX_SECRET_KEY") or DEFAULT_SECRET_KEY
        self.upload_dir = os.getenv("SPTZX_UPLOAD_DIR", "./uploads")
        self.max_file_size = _env_int("SPTZX_MAX_FILE_SIZE", 536870912)
        self.file_lifetime = _env_int("SPTZX_FILE_LIFETIME", 300)
        self.buffer_size = _env_int("SPTZX_BUFFER_SIZE", 2097152)
        self.bind_addr = os.getenv("SPTZX_BIND_ADDR", "0.0.0.0:3000")
        self.base_url = os.getenv("SPTZX_BASE_URL") or "http://localhost:3000"
        # Informational only: no admission control is implemented
        self.workers = _env_int("SPTZX_WORKERS", 16)
        self.sweep_interval = _env_int("SPTZX_SWEEP_INTERVAL", 60)
        self.log_level = os.getenv("SPTZX_LOG_LEVEL", "INFO").upper()

        # Expiry runs on a background scheduler started by create_app
        self.start_sweeper = (
            os.getenv("SPTZX_START_SWEEPER", "true").lower() == "true"
        )

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown configuration option: {key}")
            setattr(self, key, value)

    @property
    def max_content_length(self) -> int:
        """Transport-level body limit handed to Flask."""
        return self.max_file_size + MULTIPART_OVERHEAD_BYTES

    @property
    def bind_host_port(self) -> Tuple[str, int]:
        host, _, port = self.bind_addr.rpartition(":")
        return host or "0.0.0.0", int(port)
