import logging
import os
from datetime import datetime


def setup_logging(level=logging.INFO, log_dir: str = "logs"):
    """Log to the console and to a dated file under log_dir"""
    os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[
            logging.FileHandler(
                os.path.join(
                    log_dir, f"extraction_{datetime.now().strftime('%Y-%m-%d')}.log"
                )
            ),
            logging.StreamHandler(),
        ],
    )
    # Connection pool chatter drowns out the extraction progress at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logging.getLogger(__name__)
