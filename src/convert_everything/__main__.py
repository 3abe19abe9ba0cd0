#!/usr/bin/env python3

import sys

from convert_everything.server import main as server_main


def main():
    """Entry point for the convert-everything command."""
    return server_main()


if __name__ == "__main__":
    sys.exit(main())
