"""Core state and configuration for the occupancy timer."""
