"""
Tafweej Crowd Monitor
Backend Application Package

Crowd-density monitoring for pilgrimage sites: simulated density readings,
congestion-aware walking routes and operator safety alerts.
"""

__version__ = "1.0.0"
