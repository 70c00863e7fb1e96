"""
Hexaminer Module Entry Point
=============================

Allows running the Hexaminer CLI via: python -m hexaminer
"""

from hexaminer.cli import main

if __name__ == "__main__":
    main()
