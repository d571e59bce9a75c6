"""
Quote Tool Package

Business rule evaluation for dynamic product quote forms.
Resolves quote pricing using Base Price → Volume Discount → Urgency Fee,
and derives which form fields are visible and mandatory.
"""

__version__ = "1.0.0"
