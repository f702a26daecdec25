"""CLI entry point: python -m powerplant <command>"""

from powerplant.cli import main

if __name__ == "__main__":
    main()
