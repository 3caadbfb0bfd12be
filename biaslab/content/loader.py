"""
Catalog loader.

Two-stage resolution per collection:
1. Primary source - an http(s) base URL (fetched with httpx) or a local directory
2. Bundled copy shipped in biaslab/content/data/

Each of fallacies.json and scenarios.json resolves independently, so a broken
primary scenarios file still keeps primary concepts. Records that fail
validation are skipped with a warning; the rest of the file is kept.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from biaslab.core.errors import CatalogError

from .catalog import Catalog
from .schemas import ConceptRecord, ScenarioRecord

CONCEPTS_FILE = "fallacies.json"
SCENARIOS_FILE = "scenarios.json"

RecordT = TypeVar("RecordT", bound=BaseModel)


def load_catalog(
    source: str | Path | None = None,
    timeout: float = 5.0,
    client: httpx.Client | None = None,
) -> Catalog:
    """
    Load concepts and scenarios.

    Args:
        source: Base URL or directory holding the two JSON files (None = bundled only)
        timeout: HTTP timeout in seconds for remote sources
        client: Optional httpx client (for connection reuse or tests)

    Returns:
        Catalog with every record that passed validation
    """
    concepts_raw = _resolve(CONCEPTS_FILE, source, timeout, client)
    scenarios_raw = _resolve(SCENARIOS_FILE, source, timeout, client)

    concepts = [r.to_domain() for r in parse_records(concepts_raw, ConceptRecord, CONCEPTS_FILE)]
    scenarios = [r.to_domain() for r in parse_records(scenarios_raw, ScenarioRecord, SCENARIOS_FILE)]

    logger.info(f"Catalog loaded: {len(concepts)} concepts, {len(scenarios)} scenarios")
    return Catalog(concepts=tuple(concepts), scenarios=tuple(scenarios))


def _resolve(name: str, source: str | Path | None, timeout: float, client: httpx.Client | None) -> list[Any]:
    if source is not None:
        try:
            if _is_url(source):
                return fetch_json(f"{str(source).rstrip('/')}/{name}", timeout=timeout, client=client)
            return read_json_file(Path(source) / name)
        except CatalogError as e:
            logger.warning(f"{e}; falling back to bundled {name}")
    return read_bundled(name)


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


# =============================================================================
# Sources
# =============================================================================


def fetch_json(url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> list[Any]:
    """GET a JSON array over HTTP."""
    headers = {"Cache-Control": "no-store"}
    try:
        if client is not None:
            response = client.get(url, headers=headers, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as owned:
                response = owned.get(url, headers=headers)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        raise CatalogError(f"Could not fetch {url}: {e}") from e
    except ValueError as e:
        raise CatalogError(f"{url} is not valid JSON: {e}") from e
    return _expect_list(data, url)


def read_json_file(path: Path) -> list[Any]:
    """Read a JSON array from disk."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path} is not valid JSON: {e}") from e
    return _expect_list(data, str(path))


def read_bundled(name: str) -> list[Any]:
    """Read a catalog file shipped with the package."""
    text = resources.files("biaslab.content").joinpath("data").joinpath(name).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Bundled {name} is not valid JSON: {e}") from e
    return _expect_list(data, f"bundled {name}")


def _expect_list(data: Any, origin: str) -> list[Any]:
    if not isinstance(data, list):
        raise CatalogError(f"{origin} must contain a JSON array, got {type(data).__name__}")
    return data


# =============================================================================
# Validation
# =============================================================================


def parse_records(raw: list[Any], model: type[RecordT], origin: str) -> list[RecordT]:
    """
    Validate raw entries, skipping invalid ones and duplicate ids.

    The first record with a given id wins.
    """
    records: list[RecordT] = []
    seen_ids: set[str] = set()
    for position, item in enumerate(raw):
        try:
            record = model.model_validate(item)
        except ValidationError as e:
            ident = item.get("id", position) if isinstance(item, dict) else position
            logger.warning(f"Skipping {origin} entry {ident!r}: {_first_error(e)}")
            continue
        record_id = getattr(record, "id")
        if record_id in seen_ids:
            logger.warning(f"Skipping {origin} entry {record_id!r}: duplicate id")
            continue
        seen_ids.add(record_id)
        records.append(record)
    return records


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid")
    return f"{location}: {message}" if location else message
