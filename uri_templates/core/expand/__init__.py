"""Expansion engine: parsed expressions + variable bindings -> URI text."""
