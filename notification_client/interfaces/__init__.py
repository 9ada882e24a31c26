"""Outer interfaces exposing the notification client."""
