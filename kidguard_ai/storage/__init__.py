"""
In-memory metrics storage.
"""
