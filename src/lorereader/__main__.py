"""Entry point for running lorereader as a module.

Usage:
    python -m lorereader lists
    python -m lorereader --help
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env (e.g. LOREREADER_CONFIG_PATH) before reading config

from lorereader.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
