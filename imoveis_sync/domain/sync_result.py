"""Resultado de uma rodada de sincronização (nunca persistido)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SyncResult:
    """Contagens, erros por imóvel e sucesso geral de uma rodada."""

    success: bool = False
    added: int = 0
    updated: int = 0
    deleted: int = 0
    errors: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "added": self.added,
            "updated": self.updated,
            "deleted": self.deleted,
            "errors": list(self.errors),
            "timestamp": self.timestamp,
        }
