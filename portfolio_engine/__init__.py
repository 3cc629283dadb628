"""
Portfolio risk scoring, inspection grouping and route planning engine.
"""

__version__ = "1.0.0"
