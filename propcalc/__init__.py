"""
Property investment calculators for UK landlords and developers.
"""

__version__ = "0.1.0"
