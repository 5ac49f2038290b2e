#!/usr/bin/env python3
"""TakeARest entry point.

Run with:
    python main.py
    python -m takearest
"""

from takearest.__main__ import main


if __name__ == "__main__":
    main()
