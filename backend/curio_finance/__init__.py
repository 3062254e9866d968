"""Curio: personal finance tracking backend."""
