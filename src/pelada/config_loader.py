"""Persist and load engine option profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pelada.config import RatingOptions


@dataclass
class OptionsProfile:
    options: RatingOptions = field(default_factory=RatingOptions)
    notes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "OptionsProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            options=RatingOptions.from_mapping(data.get("options", {})),
            notes=data.get("notes", {}),
        )

    def save(self, path: Path) -> None:
        payload = {
            "options": self.options.to_dict(),
            "notes": self.notes,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
