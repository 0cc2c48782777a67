"""Command line entry points for the sensor-to-text bridge."""
