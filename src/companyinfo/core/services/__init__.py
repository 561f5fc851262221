"""Orchestration services shared by every entry point."""
