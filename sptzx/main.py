"""
main.py

Entry point of the sptzx file sharing service.

Notes:
  - Files live in memory-tracked storage for SPTZX_FILE_LIFETIME seconds
  - Expiry runs on an in-process APScheduler background scheduler
  - Swagger docs at /docs
"""

import atexit
import logging

from sptzx.app_factory import create_app
from sptzx.config.logging_config import setup_logging
from sptzx.config.settings import AppConfig

logger = logging.getLogger("sptzx")


def main() -> None:
    config = AppConfig()
    setup_logging(config.log_level)

    app = create_app(config)
    atexit.register(lambda: app.expiry_sweeper.shutdown(wait=False))

    host, port = config.bind_host_port
    logger.info(
        f"sptzx listening on {config.bind_addr} | Workers: {config.workers} | "
        f"Buffer: {config.buffer_size // 1024 // 1024}MB | "
        f"Max: {config.max_file_size // 1024 // 1024}MB | TTL: {config.file_lifetime}s"
    )

    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
