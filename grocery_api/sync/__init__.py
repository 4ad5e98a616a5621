"""Offline-first synchronization engine."""
