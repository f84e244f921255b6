"""
Application package initializer.

The API is split into layers: ``core`` holds configuration, storage,
logging and credential helpers; ``schemas`` holds the pydantic payload
models; ``services`` holds the business logic for each domain (users,
swaps, feedback, administration); and ``api`` exposes the versioned
routers that translate HTTP calls into service calls.
"""

from .main import app  # noqa: F401
