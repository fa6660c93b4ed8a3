"""Shipwright: turn a project description into a scaffolded, deployed web project."""

__version__ = "0.1.0"
