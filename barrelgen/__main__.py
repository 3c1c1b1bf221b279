"""Module entrypoint for ``python -m barrelgen``."""

from .cli import main


if __name__ == "__main__":
    main()
