# src/Cardiopy/__main__.py
# -*- coding: utf-8 -*-
"""
Allows `python -m Cardiopy` to run the command line interface.

This file is part of Cardiopy, licensed under the GNU Affero General Public License v3.0.
"""
import sys

from Cardiopy.application.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
