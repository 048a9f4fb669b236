"""Test package marker so pytest can import shared helpers from ``tests``."""
