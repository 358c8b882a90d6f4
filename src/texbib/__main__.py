"""Allow ``python -m texbib``."""

from texbib.ui.cli import main


if __name__ == "__main__":
    main()
