"""Allow ``python -m funccatalog``."""

from funccatalog.cli import main

if __name__ == "__main__":
    main()
