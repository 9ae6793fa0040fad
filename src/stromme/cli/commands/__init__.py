"""Top-level Strømme commands (auto-discovered by the dispatcher)."""
