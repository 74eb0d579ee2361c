"""Entry point for ``python -m provider_probe``."""

from provider_probe.cli import app

if __name__ == "__main__":
    app()
