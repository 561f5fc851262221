"""Domain models (Pydantic v2). No HTTP, HTML or CLI concerns here."""
