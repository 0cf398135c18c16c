"""
Top‑level router for version 1 of the API.

This router aggregates the per-domain routers under a unified prefix.
Public routes keep the paths the request forms already call
(``/song-request``, ``/suggestion-request`` ...); operator routes live
under ``/admin``.
"""

from fastapi import APIRouter

from .endpoints import admin, applications, health, song_requests, suggestions, verification

router = APIRouter()

router.include_router(song_requests.router, tags=["song requests"])
router.include_router(suggestions.router, tags=["suggestions"])
router.include_router(applications.router, tags=["applications"])
router.include_router(verification.router, tags=["verification"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(health.router, tags=["health"])
