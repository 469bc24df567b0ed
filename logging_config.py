"""Configuración de logging para la calculadora."""

import logging
import sys
from datetime import datetime
from typing import Optional

ROOT_LOGGER = "calculadora"


class StructuredFormatter(logging.Formatter):
    """Formato ``timestamp [NIVEL] logger: mensaje``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Configura el logger raíz de la aplicación.

    Args:
        level: DEBUG, INFO, WARNING, ERROR o CRITICAL.
        log_file: ruta opcional; si es None sólo se escribe en stderr.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger hijo de ``calculadora`` para un módulo."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
