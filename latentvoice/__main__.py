"""Module entrypoint for running latentvoice as ``python -m latentvoice``."""

from __future__ import annotations

from latentvoice.cli import main


if __name__ == "__main__":
    main()
