"""Identifier helpers."""

import uuid


def new_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid.uuid4())
