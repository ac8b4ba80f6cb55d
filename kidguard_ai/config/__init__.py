"""
Configuration loading for KidGuard AI.
"""
