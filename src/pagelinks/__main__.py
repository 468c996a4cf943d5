"""Allow ``python -m pagelinks``."""

from pagelinks.cli import cli

cli()
