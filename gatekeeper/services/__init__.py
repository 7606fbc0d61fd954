"""Business logic for roles, users and login."""
