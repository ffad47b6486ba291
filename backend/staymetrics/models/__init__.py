"""SQLAlchemy models for StayMetrics.

All models are imported here so that ``Base.metadata`` knows every table.
If you add a new model, import it in this file.
"""

from staymetrics.models.organization import Organization, UserOrganization
from staymetrics.models.property import Property
from staymetrics.models.reservation import Reservation
from staymetrics.models.user import User

__all__ = [
    "Organization",
    "Property",
    "Reservation",
    "User",
    "UserOrganization",
]
