"""
ghsetup - install a pinned, stable, or latest GitHub CLI build on a CI runner.

The package resolves a version request against the cli/cli release listing,
downloads the matching platform archive, registers it in the runner's tool
cache, and puts it on PATH.
"""
