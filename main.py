#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Drop 320x200 images into ``images/`` and run:

    python main.py batch

Or convert one file next to itself:

    python -m tiledither.cli single picture.png
"""

from tiledither.cli import app

if __name__ == "__main__":
    app()
