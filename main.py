#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Drop tile photos into ``images/`` and run:

    python main.py -i origImage.jpg -t 10

Or use the installed CLI:

    photo-mosaic --help
"""

from photo_mosaic.cli import app

if __name__ == "__main__":
    app()
