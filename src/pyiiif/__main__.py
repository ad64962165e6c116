"""Main entry point for running pyiiif as a module.

Usage:
    python -m pyiiif url <host> <identifier>
    python -m pyiiif --help
"""

from pyiiif.cli import main

if __name__ == '__main__':
    main()
