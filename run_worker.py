#!/usr/bin/env python3
"""
run_worker.py — MoodTrip enrichment CLI entry point.

Usage:
    python run_worker.py enrich "Autumn wine weekend in Tuscany" --month 10

Optional env vars (in .env):
    GEMINI_API_KEY=...          # generative images + text
    UNSPLASH_ACCESS_KEY=...     # stock search
    MOODTRIP_SITE_URL=http://localhost:3001
    MOODTRIP_MEDIA_DIR=media
"""

from __future__ import annotations

import sys

from moodtrip.main import main

if __name__ == "__main__":
    sys.exit(main())
