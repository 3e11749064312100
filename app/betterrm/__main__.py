"""Allow running better-rm as ``python -m betterrm``."""

from betterrm.cli.main import run

if __name__ == "__main__":
    run()
