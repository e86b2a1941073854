# dailyluck/core/store_registry.py
from __future__ import annotations
from typing import Callable, TypeVar
from flask import current_app

T = TypeVar("T")

def get_store(key: str, factory: Callable[[], T]) -> T:
    """Process-wide service object kept on ``current_app.extensions``."""
    ext = getattr(current_app, "extensions", None)
    if ext is None:
        current_app.extensions = {}
        ext = current_app.extensions
    store: T | None = ext.get(key)
    if store is None:
        store = factory()
        ext[key] = store
    return store