"""
Pydantic schema definitions for API payloads.

Schemas are separated from the SQL tables to decouple the JSON shapes
the front-end relies on from persistence.
"""
