"""
Gamekins package entry point.

Allows running gamekins as a module:
    python -m gamekins
"""

from gamekins.cli import main

if __name__ == "__main__":
    main()
