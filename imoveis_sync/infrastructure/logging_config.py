import logging
import json
import sys
from typing import Any

class JSONFormatter(logging.Formatter):
    """
    Formatador de logs em JSON, uma linha por evento, para ingestão por ferramentas de observabilidade.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        # Campos extras passados via logger.info(..., extra={"extra": {...}})
        if hasattr(record, "extra"):
            log_record.update(record.extra)  # type: ignore

        return json.dumps(log_record, default=str, ensure_ascii=False)

def setup_logging(level: str = "INFO"):
    """
    Configura o logging raiz da aplicação para usar JSON.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    # Remove handlers existentes para evitar duplicação
    logger.handlers = []
    logger.addHandler(handler)

    # Reduz ruído de bibliotecas
    logging.getLogger("uvicorn.access").handlers = []  # Deixa o uvicorn usar o root logger
    logging.getLogger("uvicorn.error").handlers = []
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
