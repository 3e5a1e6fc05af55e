"""
app.py — ASGI application object imported by uvicorn.

All wiring lives in ``inkbook.main.create_app``; this module only exposes
the configured instance.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from inkbook.main import create_app


# Module-level app object for uvicorn
app = create_app()
