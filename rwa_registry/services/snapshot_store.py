"""JSON persistence for registry snapshots (used by the CLI between runs)."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from ..models.registry_model import RwaRegistry, Validator

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_registry(registry: RwaRegistry, path: PathLike) -> Path:
    """Write the registry snapshot atomically (temp file + rename)."""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(registry.snapshot(), f, indent=2)
        f.write("\n")
    os.replace(tmp_path, path)
    logger.debug("Saved registry snapshot to %s", path)
    return path


def load_registry(path: PathLike, validators: Optional[Sequence[Validator]] = None) -> RwaRegistry:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    logger.debug("Loaded registry snapshot from %s", path)
    return RwaRegistry.from_snapshot(data, validators=validators)
