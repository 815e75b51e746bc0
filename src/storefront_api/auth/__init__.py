"""
storefront_api.auth

Authentication/authorization package.

Responsibilities:
- Resolve the API principal from an API key or an order token.
- Gate requests on authentication and load role titles.
- Capability checks (`Ability`) used by order-token authorization and catalog scopes.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The per-request pipeline lives in `auth.pipeline`; FastAPI wiring in `auth.deps`.
