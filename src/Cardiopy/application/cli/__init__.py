# -*- coding: utf-8 -*-
"""
Command-Line Interface (CLI) subpackage for Cardiopy.

Run with ``cardiopy`` or ``python -m Cardiopy``.
"""
from .main import main

__all__ = ['main']
