"""
ossim - replays OS meta-data operations against a simulated hardware profile
"""

__version__ = "5.0.0"
