import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def setup_logging(root: str, level: str = "INFO", retention: str = "14 days", console: bool = True):
    """Un archivo por día en <root>/YYYY/MM/DD/dme_parser.log más salida a consola."""
    logdir = Path(root) / datetime.now().strftime("%Y/%m/%d")
    logdir.mkdir(parents=True, exist_ok=True)
    logfile = logdir / "dme_parser.log"
    logger.remove()
    logger.add(
        str(logfile),
        rotation="00:00",
        retention=retention,
        level=level,
        enqueue=True,
        backtrace=True,
        # las notas llevan datos del paciente: sin volcado de variables en trazas
        diagnose=False,
    )
    if console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    return logger
