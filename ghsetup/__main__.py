"""
Entry point for running ghsetup as a module.

Usage: python -m ghsetup [command] [options]
"""

from ghsetup.cli.parser import main

if __name__ == "__main__":
    main()
