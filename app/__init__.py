"""Dispatch back-office authorization service."""
