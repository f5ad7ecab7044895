"""JSONL run trace keyed by recipe fingerprint.

Each line is one compiler phase event:

    {"seq": 3, "at": "...", "recipe": "<sha256>", "phase": "phase2_components",
     "component_id": "cdn", "data": {...}}

``seq`` restarts at 1 for every run, so two traces of the same recipe can be
diffed line by line once ``at`` is ignored.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def recipe_fingerprint(recipe_dict: Dict[str, Any]) -> str:
    """sha256 over the canonical JSON form, so equal recipes share a fingerprint."""
    canonical = json.dumps(recipe_dict, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass
class TraceLogger:
    path: Path
    fingerprint: str
    enabled: bool = True
    _seq: int = field(default=0, init=False, repr=False)

    @classmethod
    def for_recipe(cls, path: Path | str, recipe_dict: Dict[str, Any], enabled: bool = True) -> "TraceLogger":
        return cls(Path(path), recipe_fingerprint(recipe_dict), enabled=enabled)

    def log(self, phase: str, data: Dict[str, Any], *, component_id: Optional[str] = None) -> None:
        if not self.enabled:
            return
        self._seq += 1
        if self._seq == 1:
            self.path.parent.mkdir(parents=True, exist_ok=True)

        event: Dict[str, Any] = {
            "seq": self._seq,
            "at": datetime.now(timezone.utc).isoformat(),
            "recipe": self.fingerprint,
            "phase": phase,
        }
        if component_id:
            event["component_id"] = component_id
        event["data"] = data

        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event, ensure_ascii=False, default=str) + "\n")


__all__ = ["TraceLogger", "recipe_fingerprint"]
