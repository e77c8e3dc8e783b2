# File: streamhealth/__init__.py
"""Stream health analysis for LiveStats transmitter logs."""

__version__ = "0.1.0"
