"""
Entry point for running dnsperfbench as a module.

Usage: python -m dnsperfbench [OPTIONS]
"""

from .cli import main

if __name__ == "__main__":
    main()
