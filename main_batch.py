#!/usr/bin/env python3
"""
subconvert Batch Processing Entry Point

Converts all subtitle JSON files in a specified directory, ordered by size,
into structured per-format subfolders.
"""

from subconvert.batch import run_batch_processing

if __name__ == "__main__":
    run_batch_processing()
