"""
Top-level package for the Skill Swap API.

Makes ``skill_swap_api`` importable so that modules within ``app``
can be referenced with fully qualified names such as
``skill_swap_api.app.main``.  All functionality lives in submodules
under ``app``.
"""

__all__ = []
