"""
Application services: price fetching with prediction and dashboard assembly.
"""

from .price_service import PriceService
from .dashboard_service import DashboardService, DashboardSnapshot

__all__ = ["PriceService", "DashboardService", "DashboardSnapshot"]
