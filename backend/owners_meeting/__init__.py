"""Owners meeting backend: proposals, amendments, and roll-call voting."""
