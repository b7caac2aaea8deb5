"""Runnable example circuits."""
