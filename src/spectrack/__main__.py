"""Allow ``python -m spectrack``."""

from spectrack.cli import main

main()
