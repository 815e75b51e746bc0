"""
storefront_api.api

API package for the storefront service.

Responsibilities:
- FastAPI app factory and router modules.
- Content negotiation, error normalization and request-parameter helpers shared by
  every resource router.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: the auth pipeline runs as a dependency, rendering and error
# mapping live here.
