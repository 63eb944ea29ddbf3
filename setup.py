#!/usr/bin/env python3
"""
Setup script for Photo Culler

This setup.py is provided for backward compatibility.
The project configuration is primarily defined in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
