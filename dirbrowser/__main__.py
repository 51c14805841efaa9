"""Module entrypoint for ``python -m dirbrowser``."""

from .cli import main


if __name__ == "__main__":
    main()
