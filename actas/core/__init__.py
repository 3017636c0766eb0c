"""Shared configuration, logging, and paths."""
