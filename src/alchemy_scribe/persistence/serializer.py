# ABOUTME: Deterministic JSON serialization of the dataset artifact consumed by the UI
# ABOUTME: Same elements in, byte-identical file out; written atomically next to its final path

import json
import os
from pathlib import Path

from alchemy_scribe.core.models import Dataset
from alchemy_scribe.utils.logging import get_logger

logger = get_logger(__name__)


def render_dataset(dataset: Dataset) -> str:
    """Render the dataset as stable, human-diffable JSON."""
    payload = dataset.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_dataset(dataset: Dataset, path: Path) -> Path:
    """Write the artifact, replacing any previous one in a single step."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(render_dataset(dataset), encoding="utf-8")
    os.replace(tmp, path)

    logger.info("Wrote dataset artifact", path=str(path), element_count=dataset.element_count)
    return path


def load_dataset(path: Path) -> Dataset:
    """Read a previously written artifact back into a Dataset."""
    return Dataset.model_validate_json(Path(path).read_text(encoding="utf-8"))
