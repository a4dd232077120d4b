"""Configuration constants for scrollspy."""
