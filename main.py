#!/usr/bin/env python3
"""
drmeter - Dynamic Range meter for lossless audio.

Measures the DR value of every track in a folder following the DR Loudness
Standard, rates the album and writes a plain-text report.
"""

from drmeter.interface.cli import app

if __name__ == "__main__":
    app()
