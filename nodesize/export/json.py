"""JSON export of resolved node sizes."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

from nodesize.config.schema import SizingConfig
from nodesize.sizing.resolver import SizeResolution

logger = logging.getLogger("nodesize.export.json")


def sizes_to_dict(
    resolutions: Iterable[SizeResolution], config: SizingConfig
) -> Dict[str, Any]:
    """Build the exported document.

    Only nodes that receive a size appear under ``sizes``; excluded and
    missing nodes are listed separately so consumers leave them alone.
    """
    sizes: Dict[str, float] = {}
    untouched: Dict[str, str] = {}
    for resolution in resolutions:
        if resolution.size is not None:
            sizes[resolution.key] = resolution.size
        else:
            untouched[resolution.key] = resolution.source.value
    return {
        "config": config.to_dict(),
        "sizes": sizes,
        "untouched": untouched,
    }


def export_sizes(
    resolutions: Iterable[SizeResolution], config: SizingConfig, output_path: Path
) -> None:
    """Export resolved sizes to a JSON file.

    Args:
        resolutions: Resolutions to write.
        config: Snapshot the sizes were computed with.
        output_path: Output file path.
    """
    logger.info("Exporting sizes to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = sizes_to_dict(resolutions, config)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(
        "JSON export completed: %d sized, %d untouched",
        len(data["sizes"]),
        len(data["untouched"]),
    )
