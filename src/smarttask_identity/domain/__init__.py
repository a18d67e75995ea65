"""Domain layer: users, sessions and the store interfaces they live behind."""
