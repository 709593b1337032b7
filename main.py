#!/usr/bin/env python3
"""
Main Entry Point

DOI Finder - resolve free-text citations to DOIs with grounded Gemini lookups.
"""

from doi_finder.main import main

if __name__ == "__main__":
    raise SystemExit(main())
