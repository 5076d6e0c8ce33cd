"""
Analytics package exports.
"""

from recall.analytics.service import build_book_dashboard
from recall.analytics.types import BookDashboardData

__all__ = [
    "build_book_dashboard",
    "BookDashboardData",
]
