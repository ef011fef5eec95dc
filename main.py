#!/usr/bin/env python3
"""PlankIt: entry point.

Run with:
    python main.py
    python -m plankit
"""

from plankit.__main__ import main


if __name__ == "__main__":
    main()
