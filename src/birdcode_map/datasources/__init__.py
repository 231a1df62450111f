"""Source registries.

Each subdirectory is one registry with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── models.py         # Record dataclass, required columns, raw value constants
    └── parser.py         # parse_{name}(text, ...) -> ParseResult

``common.py`` holds what the parsers share: CSV reading with header checks,
BOM stripping, indeterminate-name detection and the ``ParseResult`` types.

Adding a new registry
---------------------
1. Create ``datasources/{name}/`` with the files above.
   See ``banding/`` for a minimal example, ``checklist/`` for one with
   category handling.

2. Write a parser that walks ``read_rows`` output, normalizes names before
   validating them, and keeps ``valid + skipped + error == total``.

3. Re-export the public API in ``__init__.py`` with ``__all__``.

4. Add tests in ``tests/test_{name}_parser.py``.
"""
