"""Core infrastructure: paths, configuration, and theming."""
