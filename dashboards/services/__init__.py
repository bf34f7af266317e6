"""
Dashboard services module
"""

from .date_ranges import DateRange
from .stats import StatsDashboardService
from .viewpoints import (
    AdminViewpoint,
    SellerViewpoint,
    SupplierViewpoint,
    viewpoint_for_user,
)

__all__ = [
    'DateRange',
    'StatsDashboardService',
    'AdminViewpoint',
    'SellerViewpoint',
    'SupplierViewpoint',
    'viewpoint_for_user',
]
