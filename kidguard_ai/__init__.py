"""
KidGuard AI.

Adaptive exercise generation and answer validation for children.
"""

__version__ = "0.1.0"
