"""
fourline.interfaces - Outer interfaces to the engine and rating tracker

This package contains the JSON-RPC dispatcher and the command-line interface.
"""

# Don't import anything here to avoid circular imports
__all__ = []
