"""
Application package initializer.

The project is organised by layer: ``core`` (configuration, database,
security, errors), ``schemas`` (request and response models),
``services`` (business logic) and ``api`` (HTTP routes).
"""

from .main import app  # noqa: F401
