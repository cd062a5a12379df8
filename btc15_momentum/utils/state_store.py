"""
State Store

Durable storage for the price-history cache (whole JSON documents)
and the append-only trade log (JSONL).
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class StateStore:
    """
    File-backed persistence.

    Names are resolved against data_dir unless they are absolute paths.
    Documents are read and written whole; there are no partial updates.
    """

    def __init__(self, data_dir: PathLike = "."):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: PathLike) -> Path:
        path = Path(name)
        return path if path.is_absolute() else self.data_dir / path

    def read_text(self, name: PathLike) -> Optional[str]:
        """Raw document contents, or None if it does not exist."""
        path = self.path_for(name)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write_document(self, name: PathLike, data: dict):
        """Replace a JSON document atomically."""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, path)

    def append_jsonl(self, name: PathLike, record: dict):
        """Append a record to a JSONL log file."""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(record, default=str)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
