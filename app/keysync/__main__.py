"""Allow running keysync as ``python -m keysync``."""

from keysync.cli.main import app

if __name__ == "__main__":
    app()
