"""Earthquake Visualizer."""
