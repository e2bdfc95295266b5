"""
fourline - Connect Four game engine with Elo rating tracking

This package provides an immutable Connect Four board engine with win
detection, a game session helper, a rating tracker for named players and a
JSON-RPC style dispatcher and command-line interface around them.
"""

# Version number
__version__ = '0.1.0'
