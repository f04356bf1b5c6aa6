from loguru import logger
import sys


def setup_logging(level: str = "INFO"):
    logger.remove()
    logger.add(sys.stdout, level=level.upper(),
               backtrace=True, diagnose=False,
               format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | {message}")
    return logger
