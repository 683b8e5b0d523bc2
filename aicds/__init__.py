"""Configuration, logging, serial PTZ control, monitoring and utilities for a camera system."""

__version__ = "2.0.0"