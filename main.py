#!/usr/bin/env python3
"""
Solar Gestures - run from a source checkout.

Usage:
    python main.py [--mode preview|headless|benchmark] [--config PATH]
"""

from solar_gestures.app import main

if __name__ == "__main__":
    raise SystemExit(main())
