"""
Entry point for running npmvm CLI as a module.

Usage: python -m npmvm.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
