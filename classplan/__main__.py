"""
Package entry point.

Allows running the application via:

    python -m classplan

This simply forwards execution to classplan.cli.main().
"""

from classplan.cli import main

if __name__ == "__main__":
    main()
