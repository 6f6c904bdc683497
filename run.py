# -*- coding: utf-8 -*-

"""
Main entry point for rendering a contract document from the command line.
"""

import logging
import sys

from contract_renderer.cli import main

if __name__ == '__main__':
    exit_code = main()
    logging.getLogger("contract_renderer").info("===== Application terminated =====")
    sys.exit(exit_code)
