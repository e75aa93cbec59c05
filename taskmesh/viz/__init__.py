"""Visualization layer: trajectory plots."""

from taskmesh.viz.render import render_trajectories

__all__ = ["render_trajectories"]
