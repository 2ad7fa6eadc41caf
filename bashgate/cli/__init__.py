"""CLI module for bashgate."""
