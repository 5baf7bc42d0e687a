#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

    python main.py photo.jpg tiles/
    python main.py photo.jpg tiles/ --mix --random-mix

Or use the module directly:

    python -m tile_mosaic.cli --help
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()
