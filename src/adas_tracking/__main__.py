"""
Entry point for running the tracking pipeline as a module.

Usage:
    python -m adas_tracking [detections.jsonl]
"""

from .cli import main

if __name__ == "__main__":
    main()
