#!/usr/bin/env python3
"""
Setup shim for Cardiopy.
All configuration lives in pyproject.toml.
"""

from setuptools import setup

# Kept for tools that still invoke setup.py directly
setup()
