"""
Configuração de logging.

Sempre no console; também em arquivo rotativo dentro de LOG_DIR quando definido.
"""

import os
import logging
from logging.handlers import RotatingFileHandler


def setup_logging(log_level: str = "INFO", log_dir: str = ""):
    """
    Configura a hierarquia de loggers "informes".

    Args:
        log_level (str): Nome do nível, ex. "DEBUG" ou "INFO"
        log_dir (str): Pasta do informes.log; vazio desativa o arquivo

    Note:
        - Rotação: 10MB x 5 backups
        - Chamar de novo substitui os handlers em vez de acumular
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger("informes")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, 'informes.log'),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.info('Log level: %s', logging.getLevelName(level))
    return logger
