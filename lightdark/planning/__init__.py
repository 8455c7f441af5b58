"""
Belief-space tree search planners backed by ``pomdp_py``.
"""

from lightdark.planning.pomcp import POMCPPlanner

__all__ = ["POMCPPlanner"]
