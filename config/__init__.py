"""Settings loaded from YAML."""
