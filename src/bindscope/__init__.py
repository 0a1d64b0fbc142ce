"""Inspect the bindings declared for a Worker."""
