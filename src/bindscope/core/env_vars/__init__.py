"""Environment variable configuration."""
