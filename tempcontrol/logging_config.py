# =====================================================
# tempcontrol/logging_config.py - Logging setup
# =====================================================
import logging

from tempcontrol import config


def configure_logging(level_name: str = None) -> None:
    """
    Configura il root logger una sola volta.

    Formato chiave=valore su stdout (compatibile Docker), livello da LOG_LEVEL.
    """
    level_str = (level_name or config.LOG_LEVEL).upper().strip()
    level = getattr(logging, level_str, logging.INFO)

    # Evita handler doppi se chiamata più volte (reload uvicorn, test)
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s",
    )
