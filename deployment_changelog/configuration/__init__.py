"""Configuration and command line interface for the deployment changelog."""
