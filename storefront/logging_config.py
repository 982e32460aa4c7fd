# storefront/logging_config.py
import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configures the root logger for the service.
    Works alongside Uvicorn, which installs its own handlers on its own loggers.
    """
    root_logger = logging.getLogger()

    # Module loggers inherit this unless they set their own.
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers when the app factory runs more than once
    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        root_logger.info("Logging configured successfully.")
    else:
        root_logger.info("Logging already configured.")
