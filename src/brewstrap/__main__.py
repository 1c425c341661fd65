"""Allow ``python -m brewstrap``."""

from brewstrap.cli import cli

cli()
