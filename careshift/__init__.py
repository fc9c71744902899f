"""
CareShift - geofenced shift tracking for care workers
"""

__version__ = "1.0.0"
