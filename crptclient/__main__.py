"""Module entrypoint for running crptclient as ``python -m crptclient``."""

from __future__ import annotations

from crptclient.cli import main


if __name__ == "__main__":
    main()
