"""
Command-line interface for KidGuard AI.
"""
