"""
Entry point for running leadqueue as a module.

Usage:
    python -m leadqueue [command] [options]

Example:
    python -m leadqueue submit free-class -f name=Jane -f email=jane@example.com
    python -m leadqueue offline status
    python -m leadqueue offline drain
"""

from leadqueue.cli.main import cli

if __name__ == "__main__":
    cli()
