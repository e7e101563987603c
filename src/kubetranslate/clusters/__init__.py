"""Builtin cluster capability descriptors."""
