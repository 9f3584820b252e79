from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Optional


class AuditLogger:
    """
    Appends one JSON line per fetch/decode call.
    An empty path turns the logger into a no-op.
    """

    def __init__(self, path: str):
        self.path: Optional[Path] = Path(path) if path else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, event: Dict[str, Any]) -> None:
        if self.path is None:
            return
        event = dict(event)
        event.setdefault("ts", time.time())
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
