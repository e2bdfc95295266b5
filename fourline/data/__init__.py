"""
fourline.data - Statistics snapshots on disk
"""

from fourline.data.data_manager import load_statistics, save_statistics

__all__ = ['load_statistics', 'save_statistics']
