"""
High-level use cases for the Vitrine admin panel.

Routers (FastAPI endpoints) call these services instead of manipulating the
JSON files or the session store directly.
"""
