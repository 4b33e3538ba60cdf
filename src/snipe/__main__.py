"""Allow ``python -m snipe``."""

from snipe.cli.main import cli

if __name__ == "__main__":
    cli()
