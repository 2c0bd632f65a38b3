"""
Repository interfaces for the domain layer.
"""
