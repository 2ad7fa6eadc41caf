"""Entry point for `python -m bashgate`."""

from bashgate.cli.commands import app

if __name__ == "__main__":
    app()
