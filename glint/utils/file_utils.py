"""File utilities."""
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Union

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_text_file(path: PathLike) -> str:
    """Read a file as UTF-8, falling back to dropping undecodable bytes."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return p.read_text(encoding="utf-8", errors="ignore")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def list_stems(directory: PathLike, suffix: str) -> List[str]:
    """Sorted file stems in ``directory`` with the given suffix (".svg")."""
    p = Path(directory)
    if not p.is_dir():
        return []
    return sorted(f.stem for f in p.iterdir() if f.is_file() and f.suffix.lower() == suffix)
