"""Entry point for running jirakit as a module.

This allows running the application with:
    python -m jirakit [OPTIONS] COMMAND [ARGS]
"""

from jirakit.cli import app

if __name__ == "__main__":
    app()
