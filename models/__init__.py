"""
models/ - Domain Models
=======================
Plain dataclasses passed between the repository, service and handler layers.
"""
