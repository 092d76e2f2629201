"""Core services: configuration, database, hierarchy rules."""
