"""Shared utilities: console, logging, configuration, threads, emoji."""
