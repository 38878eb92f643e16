from __future__ import annotations

from pairleroy.core.session import BoardSession
from pairleroy.engine.models import BoardConfig

__all__ = [
    "BoardConfig",
    "BoardSession",
]
