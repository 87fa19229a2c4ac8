# src/Cardiopy/application/__init__.py
"""Application layer: plugin loading and the command line interface."""
