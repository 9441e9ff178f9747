#!/usr/bin/env python3
"""
CultiMap - Entry point for python -m cultimap

This module allows the package to be run as a module:
    python -m cultimap
"""

import sys

from cultimap import main

if __name__ == "__main__":
    sys.exit(main())
