"""Permite executar ``python -m patrimonio``."""

from patrimonio.cli import app

if __name__ == "__main__":
    app()
