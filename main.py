#!/usr/bin/env python3
"""
dockmigrate - container migration tool
Main entry point when run from a source checkout.
"""

from dockmigrate.cli import main

if __name__ == "__main__":
    main()
