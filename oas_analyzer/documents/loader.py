"""Load API definitions from JSON or YAML files."""

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

logger = logging.getLogger(__name__)


def load_document(path: Union[str, Path]) -> dict[str, Any]:
    """Load a definition file into a plain dict.

    ``.yaml``/``.yml`` files go through ``yaml.safe_load``; everything else
    is parsed as JSON.

    Raises:
        ValueError: If the file does not contain a mapping at the top level.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(
            f"Definition {path} must be a mapping at the top level, "
            f"got {type(data).__name__}"
        )

    logger.debug(f"Loaded definition from {path} ({len(data)} top-level keys)")
    return data
