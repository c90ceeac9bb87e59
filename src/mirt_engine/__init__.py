import logging
import sys

# Console handler shared by every logger that has no handler of its own.
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# Package loggers (named with __name__) propagate to this one.
package_logger = logging.getLogger("mirt_engine")
package_logger.setLevel(logging.INFO)
package_logger.addHandler(console_handler)

# Quiet chatty library loggers
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
