"""Package entry point for ``python -m neo_converter``.

WHY: Python's ``-m`` flag looks for ``__main__.py`` inside the package
and executes it; this delegates straight to the CLI.
"""

from neo_converter.cli import main

if __name__ == "__main__":
    main()
