"""
data_manager.py - JSON snapshots of player statistics

This module saves and loads a StatisticsStore as a JSON object mapping player
names to their flat statistics. Files are guarded by a lock file so several
processes can share one snapshot, and writes go through a temporary file that
replaces the original in one move.
"""

import json
import os
import shutil
from typing import Any, Optional

import filelock

from fourline.debug import debug
from fourline.stats.tracker import Statistics, StatisticsStore, statistics_to_json

# Define paths to data files
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
DATA_DIR = os.path.join(BASE_DIR, 'data')
STATISTICS_FILE = os.path.join(DATA_DIR, 'statistics.json')

LOCK_TIMEOUT = 10  # Seconds to wait for another process's lock


def _lock_for(file_path: str) -> filelock.FileLock:
    return filelock.FileLock(f"{file_path}.lock", timeout=LOCK_TIMEOUT)


def safe_read_json(file_path: str, default: Any = None) -> Any:
    """
    Read a JSON file while holding its lock.

    Args:
        file_path: Path to JSON file
        default: Value returned when the file does not exist

    Returns:
        Parsed JSON data

    Raises:
        ValueError: if the file exists but is not valid JSON
    """
    if not os.path.exists(file_path):
        return default

    with _lock_for(file_path):
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            debug.error(f"Error decoding JSON from {file_path}: {e}", "data")
            raise ValueError(f"{file_path} is not valid JSON: {e}") from e


def safe_write_json(file_path: str, data: Any) -> bool:
    """
    Write data to a JSON file with an atomic replace.

    Args:
        file_path: Path to JSON file
        data: Data to write

    Returns:
        True if successful, False otherwise
    """
    directory = os.path.dirname(os.path.abspath(file_path))
    try:
        os.makedirs(directory, exist_ok=True)
        with _lock_for(file_path):
            temp_file = f"{file_path}.tmp"
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, sort_keys=True)

            shutil.move(temp_file, file_path)
            return True
    except (OSError, filelock.Timeout, TypeError) as e:
        debug.error(f"Error writing to {file_path}: {e}", "data")
        return False


def save_statistics(store: StatisticsStore, file_path: Optional[str] = None) -> bool:
    """
    Save every record in the store.

    Args:
        store: The statistics store to save
        file_path: Destination, defaults to STATISTICS_FILE

    Returns:
        True if successful, False otherwise
    """
    file_path = file_path or STATISTICS_FILE
    records = statistics_to_json(store.snapshot_all())
    if safe_write_json(file_path, records):
        debug.debug(f"Saved statistics for {len(records)} players to {file_path}", "data")
        return True
    return False


def load_statistics(file_path: Optional[str] = None) -> StatisticsStore:
    """
    Load a statistics store from a snapshot.

    Args:
        file_path: Snapshot to read, defaults to STATISTICS_FILE

    Returns:
        The loaded store, or an empty store if the file does not exist

    Raises:
        ValueError: if the snapshot is malformed
    """
    file_path = file_path or STATISTICS_FILE
    data = safe_read_json(file_path, default={})
    if not isinstance(data, dict):
        raise ValueError(f"{file_path} must contain a JSON object of player statistics")

    records = {}
    for name, fields in data.items():
        if not isinstance(fields, dict):
            raise ValueError(f"Statistics for {name!r} in {file_path} must be an object")
        records[name] = Statistics.from_dict(fields)

    debug.info(f"Loaded statistics for {len(records)} players from {file_path}", "data")
    return StatisticsStore(records)
