"""
examples/inspect_purls.py

A script to inspect a batch of Package URLs (purls) read from a file.

Each line of the input file is parsed; valid purls are resolved to their
registry page and VulnerableCode search link, and optionally enriched with
license and version data from PurlDB. Invalid lines are reported with the
reason they were rejected.

Prerequisites:
- Ensure the 'purlviewer' package is installed.
- Optionally set PURLDB_API to point at a private PurlDB instance and
  PURLDB_TOKEN if that instance requires an API key.

Usage:
python examples/inspect_purls.py purls.txt [--purldb]
"""
import argparse
import logging
import sys

from purlviewer import APIClient, ParseError, PurlDBClient, inspect_purl
from purlviewer.display import render_license_info

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    """
    Main function to inspect the purls listed in a file.
    """
    parser = argparse.ArgumentParser(description="Inspect Package URLs listed one per line in a file.")
    parser.add_argument("path", help="File containing one purl per line.")
    parser.add_argument("--purldb", action="store_true", help="Enrich each purl with PurlDB data.")
    args = parser.parse_args()

    try:
        with open(args.path) as f:
            lines = [line.strip() for line in f if line.strip()]
    except OSError as e:
        logger.error(f"Could not read {args.path}: {e}")
        sys.exit(1)

    client = PurlDBClient(api_client=APIClient(max_retries=5, logging_level=logging.INFO)) if args.purldb else None
    invalid = 0
    try:
        for line in lines:
            result = inspect_purl(line, purldb_client=client)
            if isinstance(result, ParseError):
                invalid += 1
                logger.warning(f"{line}: [{result.code}] {result.message}")
                continue

            registry = result.registry.url or result.registry.message or "no registry link"
            print(f"{result.input}")
            print(f"  registry:        {registry}")
            print(f"  vulnerabilities: {result.vulnerablecode.url}")
            if result.purldb_enabled:
                print(f"  license:         {render_license_info(result.purldb_package)}")
                print(f"  known versions:  {len(result.purldb_versions)}")
    finally:
        if client:
            client.close()

    logger.info(f"Inspected {len(lines)} purls, {invalid} invalid.")


if __name__ == "__main__":
    main()
