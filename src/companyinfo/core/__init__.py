"""Core: configuration, domain models, contracts and orchestration."""
