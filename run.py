#!/usr/bin/env python3
"""
run.py - Main entry point for the fourline engine and rating tracker

Examples:
    python run.py play --player-1 Alice --player-2 Bob --stats-file data/statistics.json
    python run.py analyse --position "[[1,1,1,1,0,0],[2,2,2,0,0,0]]"
    python run.py stats Alice Bob --stats-file data/statistics.json
    python run.py rpc --stats-file data/statistics.json
"""

import sys

from fourline.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
