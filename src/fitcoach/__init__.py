"""Adaptive coaching loop: weight check-ins, target adjustments and cardio sessions."""

__version__ = "0.1.0"
