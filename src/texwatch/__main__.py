"""Allow running texwatch as ``python -m texwatch``."""

from texwatch.ui.cli import main


if __name__ == "__main__":
    main()
