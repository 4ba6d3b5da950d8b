#!/usr/bin/env python

"""
Main entry point for allelejoin when run as a module.
Allows executing with: python -m allelejoin
"""

from allelejoin.cli import app

if __name__ == "__main__":
    app()
