"""
Interactive Finance Lessons: computation and module-registry core.
"""

__version__ = "1.0.0"
