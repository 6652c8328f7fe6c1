"""Operator scripts for the tenure reconciliation engine."""
