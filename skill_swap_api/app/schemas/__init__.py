"""
Pydantic schema definitions for API payloads.

Attributes are snake_case in Python and serialized with the camelCase
names used by the web client (``skillsOffered``, ``isPublic``...).
"""
