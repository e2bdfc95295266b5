"""
fourline.stats - Elo ratings and per-player statistics
"""

from fourline.stats.tracker import RatingTracker, Statistics, StatisticsStore

__all__ = ['RatingTracker', 'Statistics', 'StatisticsStore']
