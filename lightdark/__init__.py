"""
Light-Dark 1-D POMDP with belief-space Monte Carlo tree search.
"""

__version__ = "0.1.0"
