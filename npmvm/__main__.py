"""
Entry point for running npmvm CLI as a module.

Usage: python -m npmvm [command] [options]
"""

from npmvm.cli.parser import main

if __name__ == "__main__":
    main()
