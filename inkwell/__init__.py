"""
Inkwell - a small publishing platform API.

Users sign up, write articles, and browse each other's profiles.
"""

__version__ = "0.1.0"
