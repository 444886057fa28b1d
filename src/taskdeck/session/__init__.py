"""Session token lifecycle (SessionStore) and its durable storage."""
