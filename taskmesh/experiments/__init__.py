"""Experiments layer: command-line scenario runs."""

from taskmesh.experiments.run import main

__all__ = ["main"]
