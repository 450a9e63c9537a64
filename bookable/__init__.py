"""
bookable - compute bookable time slots from weekly working hours.
"""

__version__ = "0.1.0"
