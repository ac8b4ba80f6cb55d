"""
Core modules for KidGuard AI.

This package contains age guidelines, exercise schemas, pricing, and the
generation and validation orchestrators.
"""
