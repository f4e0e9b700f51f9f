"""Server core: settings and constants."""
