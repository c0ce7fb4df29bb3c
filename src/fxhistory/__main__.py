# src/fxhistory/__main__.py
"""Allow ``python -m fxhistory`` to run history generation."""

from fxhistory.app import main

if __name__ == "__main__":
    main()
