"""Terminal presentation for reprac."""

from reprac.ui.app import DashboardApp

__all__ = ["DashboardApp"]
