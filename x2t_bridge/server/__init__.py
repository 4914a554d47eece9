"""HTTP API for document ↔ bin conversion (FastAPI)."""
