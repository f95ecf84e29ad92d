"""
Entry point for running ghsetup CLI as a module.

Usage: python -m ghsetup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
