"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each request type (song requests, suggestions,
applications, email verification) has its own service in
``services`` and exposes a router defined in ``api/v1/endpoints``.
Moderation routes for club operators live alongside them.
"""

from .main import app  # noqa: F401
