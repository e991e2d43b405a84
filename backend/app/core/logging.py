# backend/app/core/logging.py
"""
Configuration du logging applicatif.

Format texte en dev, JSON en prod (LOG_FORMAT=json).
Les événements métier du moteur d'adaptation passent par log_event()
avec une catégorie fixe : enhancement | rating | api | system.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from app.core.config import settings

RATING_EVENT_CATEGORIES = ("enhancement", "rating", "api", "system")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
            "module":    record.module,
            "function":  record.funcName,
            "line":      record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Champs passés via extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


def setup_logging() -> logging.Logger:
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    if settings.LOG_FORMAT == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root_logger


def log_event(
    logger: logging.Logger,
    category: str,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Log structuré d'un événement métier (user_id, moyennes, variation...)."""
    if category not in RATING_EVENT_CATEGORIES:
        category = "system"
    extra_fields = {"category": category, **fields}
    suffix = " ".join(f"{k}={v}" for k, v in fields.items())
    logger.log(
        level,
        f"[{category}] {message}" + (f" {suffix}" if suffix else ""),
        extra={"extra_fields": extra_fields},
    )
