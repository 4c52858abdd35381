"""Scaffolded user management module."""

from usuarios.module import Module

__all__ = ["Module"]
