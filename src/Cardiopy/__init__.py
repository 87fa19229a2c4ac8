# -*- coding: utf-8 -*-
"""
Cardiopy: a multi-lead ECG / biosignal recording toolkit.

This package provides tools for importing multi-lead recordings through
pluggable file adapters, cleaning them with a fixed set of filters, and
exporting them together with bad-lead and annotation lists.
"""

# PEP 396 style version marker
__version__ = "0.1.0"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__license__"]
