"""
Convenience entry point for running gathertime directly.

Usage: python -m gathertime [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
