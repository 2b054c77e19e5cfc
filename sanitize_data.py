#!/usr/bin/env python3
"""CSV Formula Injection Sanitizer.

This is the main entry point script for the data sanitizer.
It wraps the package CLI for convenient execution; install the
package first (pip install -e .).

Usage:
    python sanitize_data.py contacts.csv -o contacts_clean.xlsx

For full documentation and options:
    python sanitize_data.py --help
"""

import sys

from data_sanitizer.cli import main

if __name__ == "__main__":
    sys.exit(main())
