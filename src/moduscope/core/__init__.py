"""Core domain: models, ports, events and collectors."""
