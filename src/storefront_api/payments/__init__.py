"""
storefront_api.payments

Outbound payment gateway boundary.
"""

# Package marker.
