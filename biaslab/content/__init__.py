"""
Catalog content: concepts (biases/fallacies) and the scenarios that exercise them.

- schemas: pydantic validation of raw JSON records
- catalog: read-only Catalog with lookup and library search
- loader: primary source (URL or directory) with bundled fallback
"""

from .catalog import Catalog
from .loader import load_catalog

__all__ = ["Catalog", "load_catalog"]
