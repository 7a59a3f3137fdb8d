"""Logging, metrics and the injectable observer hook."""
