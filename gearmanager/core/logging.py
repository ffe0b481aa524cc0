import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PACKAGE_LOGGER = "gearmanager"


def setup_logging(level: str = "INFO", debug: bool = False):
    """Root handler at `level`. `debug` lowers only the gearmanager.* loggers,
    so rejected mutations show up without third-party noise."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if debug:
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
