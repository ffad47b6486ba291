"""Shared API dependencies — single import point for all routers::

    from staymetrics.api.deps import get_db, get_current_user
"""

from staymetrics.auth.dependencies import ensure_organization_member, get_current_user
from staymetrics.clients.market_data import get_market_data_client
from staymetrics.database import get_db

__all__ = [
    "ensure_organization_member",
    "get_current_user",
    "get_db",
    "get_market_data_client",
]
