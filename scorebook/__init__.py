"""
Scorebook - live club cricket scoring
"""
__version__ = "0.1.0"
