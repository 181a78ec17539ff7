"""User interfaces for layoutsmith."""
