"""Registry of workers running locally in dev sessions."""
