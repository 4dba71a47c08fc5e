"""
docktails - entry point for running from a source checkout.

Reads settings from the environment (DOCKER_HOST, DOCKER_CERT_PATH, LOG_LEVEL,
DOCKTAILS_PREFIX, DOCKTAILS_JSON) and command line flags, then tails every
matching container until interrupted.
"""
import sys

from docktails.cli import main

if __name__ == "__main__":
    sys.exit(main())
