"""
Top‑level package for the broadcast club request portal API.

This file makes ``broadcast_portal_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``broadcast_portal_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
