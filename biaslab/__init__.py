"""
BiasLab: scenario-based practice for cognitive biases and logical fallacies.

Components:
- core: progress state, scoring/badge policy, the progress store
- storage: key/value persistence backends (memory, JSON file, SQL)
- content: catalog records, loading with bundled fallback, library search
- practice: session engine that sequences scenarios and summarizes results
- cli: typer/rich terminal front end
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
