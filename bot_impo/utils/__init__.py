"""Presentation and conversation helpers."""
