"""
structdoc package entry point.

Allows running structdoc as a module:
    python -m structdoc
"""

from structdoc.cli import main

if __name__ == "__main__":
    main()
