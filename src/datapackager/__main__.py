"""Entry point for running datapackager as a module.

Usage:
    python -m datapackager [command] [options]

Example:
    python -m datapackager init mypkg -o tbl -f process.py
    python -m datapackager build mypkg
"""

from datapackager.cli import app

if __name__ == "__main__":
    app()
