"""Configuration: post options, controller profiles and default tools."""
