"""Pure building blocks of the conversion layer.

WHY: Name sanitizing, format classification and parameter rendering have
no dependency on a running engine. Keeping them apart from the engine and
orchestration code makes them trivially testable.

HOW: sanitize.py cleans file names, formats.py holds the extension and
format-code tables, params.py renders the engine's parameter document,
models.py defines the result dataclasses.

RULES:
- Nothing in this package performs I/O
- Tables are data; extending them must not require code changes
"""
