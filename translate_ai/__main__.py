"""
Entry point for running translate-ai as a module.

Usage:
    python -m translate_ai --help
    python -m translate_ai scan --dir ./src
    python -m translate_ai generate --languages fr,es --provider openai
"""
from .cli import app


if __name__ == "__main__":
    app()
