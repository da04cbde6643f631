"""
API module of the service.
Contains the routers and the request/response models.

Routers are imported from their modules directly (``api.routes``,
``api.analytics_routes``) because the analytics engine itself depends on
``api.analytics_models``.
"""
