from __future__ import annotations

import os
from pathlib import Path


def read_env_file(env_path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    if not env_path.exists():
        return values
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env_file(base_dir: Path, filename: str = ".env") -> None:
    """Load simple KEY=VALUE pairs from a local .env file.

    Existing environment variables are preserved.
    """
    for key, value in read_env_file(base_dir / filename).items():
        os.environ.setdefault(key, value)
