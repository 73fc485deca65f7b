"""
Elfview Module Entry Point
===========================

Allows running the Elfview CLI via: python -m elfview
"""

from elfview.cli import main

if __name__ == "__main__":
    main()
