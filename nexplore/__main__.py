"""Allow ``python -m nexplore``."""

from .cli import main

main()
