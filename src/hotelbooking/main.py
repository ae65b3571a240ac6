from __future__ import annotations
import logging
import sys

from hotelbooking.channels import create_telegram_app, run_telegram_bot
from hotelbooking.config import get_config
from hotelbooking.exceptions import HotelBookingError

logger = logging.getLogger(__name__)


def main() -> int:
    config = get_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=config.get_log_level(),
    )
    try:
        app = create_telegram_app()
        run_telegram_bot(app)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except HotelBookingError as e:
        logger.error(f"Startup failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
