"""
Alerts Module

Operator safety alerts shown on the dashboard until they expire.
"""

from tafweej.alerts.alert_store import AlertStore

__all__ = ['AlertStore']
