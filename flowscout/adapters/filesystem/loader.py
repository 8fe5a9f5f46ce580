"""
Corpus Directory Loader - Read workflow templates from category folders.

Each subdirectory of the corpus root is one category holding a
``metadata.json`` in one of two layouts:

- a JSON array of workflow records (indexer export), or
- a JSON object keyed by workflow id, next to ``<id>.json`` workflow files.

Records are returned raw; validation belongs to the corpus store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from flowscout.config.errors import CorpusLoadError

logger = logging.getLogger(__name__)

__all__ = ["CorpusSource", "load_corpus_directory"]

METADATA_FILE = "metadata.json"


class CorpusSource(BaseModel):
    """Raw records read from disk, plus what could not be read."""

    documents: list[dict[str, Any]] = Field(default_factory=list)
    skipped: list[tuple[str, str]] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _with_node_count(record: dict[str, Any], workflow: Any = None) -> dict[str, Any]:
    """Fill nodes_count from an inline or sibling workflow definition."""
    if "nodes_count" in record:
        return record
    source = workflow if isinstance(workflow, dict) else record
    nodes = source.get("nodes")
    if isinstance(nodes, list):
        record["nodes_count"] = len(nodes)
    return record


def _records_from_list(category: str, metadata: list[Any], source: CorpusSource) -> None:
    for index, entry in enumerate(metadata):
        if not isinstance(entry, dict):
            source.skipped.append((f"{category}/{METADATA_FILE}[{index}]", "not an object"))
            continue
        record = {**entry, "category": category}
        source.documents.append(_with_node_count(record))


def _records_from_mapping(
    category: str,
    category_dir: Path,
    metadata: dict[str, Any],
    source: CorpusSource,
) -> None:
    workflow_files = sorted(
        p for p in category_dir.glob("*.json") if p.name != METADATA_FILE
    )
    seen: set[str] = set()

    for path in workflow_files:
        workflow_id = path.stem
        try:
            workflow = _read_json(path)
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable workflow %s: %s", path, e)
            source.skipped.append((f"{category}/{path.name}", str(e)))
            continue
        seen.add(workflow_id)

        meta = metadata.get(workflow_id)
        meta = meta if isinstance(meta, dict) else {}
        record = {
            **meta,
            "id": workflow_id,
            "title": meta.get("title") or workflow_id,
            "category": category,
            "original_filename": path.name,
        }
        source.documents.append(_with_node_count(record, workflow))

    # Metadata entries whose workflow file is missing are still searchable
    for workflow_id, meta in metadata.items():
        if workflow_id in seen:
            continue
        if not isinstance(meta, dict):
            source.skipped.append((f"{category}/{workflow_id}", "metadata entry is not an object"))
            continue
        record = {**meta, "id": workflow_id, "category": category}
        record.setdefault("title", workflow_id)
        source.documents.append(_with_node_count(record))


def load_corpus_directory(root: str | Path) -> CorpusSource:
    """
    Read every category folder under root.

    Args:
        root: Corpus directory (one subdirectory per category)

    Returns:
        CorpusSource with raw records in category-name order

    Raises:
        CorpusLoadError: Root directory does not exist
    """
    root = Path(root)
    if not root.is_dir():
        raise CorpusLoadError(f"Corpus directory not found: {root}", details={"path": str(root)})

    source = CorpusSource()

    for category_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        category = category_dir.name
        metadata_path = category_dir / METADATA_FILE

        metadata: Any = {}
        if metadata_path.exists():
            try:
                metadata = _read_json(metadata_path)
            except (OSError, ValueError) as e:
                logger.warning("Skipping category %s: bad %s (%s)", category, METADATA_FILE, e)
                source.skipped.append((f"{category}/{METADATA_FILE}", str(e)))
                continue

        before = len(source.documents)
        if isinstance(metadata, list):
            _records_from_list(category, metadata, source)
        elif isinstance(metadata, dict):
            _records_from_mapping(category, category_dir, metadata, source)
        else:
            source.skipped.append((f"{category}/{METADATA_FILE}", "expected array or object"))
            continue

        count = len(source.documents) - before
        if count:
            source.categories.append(category)
        logger.debug("Category %s: %d records", category, count)

    logger.info(
        "Read %d records from %d categories under %s (%d skipped)",
        len(source.documents),
        len(source.categories),
        root,
        len(source.skipped),
    )
    return source
