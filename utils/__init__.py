"""
utils/ - Shared Helpers
=======================
Logging setup and the error types used across all layers.
"""
