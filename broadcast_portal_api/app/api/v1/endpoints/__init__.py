"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for one request type
(song requests, suggestions, applications, verification) or for the
operator moderation routes.  The routers are aggregated in
``router.py`` at the package level and then included in the main
application.
"""
