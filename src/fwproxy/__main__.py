"""
CLI entry point for running fwproxy as a module.

Usage: python -m fwproxy [OPTIONS] COMMAND [ARGS]...
"""

from fwproxy.cli.main import cli

if __name__ == "__main__":
    cli()
