"""CLI entry point for configuration introspection.

Usage:
    python -m scriptarc.config
    python -m scriptarc.config --check
    python -m scriptarc.config --json
"""

from .introspection import main

if __name__ == "__main__":
    main()
