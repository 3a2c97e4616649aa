#!/usr/bin/env python3
"""
subconvert Entry Point Script

This script initializes the CLI handler and runs a single-file conversion.
"""

from subconvert.cli import CLIHandler

if __name__ == "__main__":
    cli = CLIHandler()
    cli.run()
