"""
Skiff - Declarative container service management for AWS.

This package provides a CLI for registering container services with an
application and writing the manifests that describe how they are deployed.
"""

__version__ = "0.1.0"
__author__ = "Skiff Authors"
