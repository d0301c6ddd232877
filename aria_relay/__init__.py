"""Aria Voice Relay: persona voice transformation service."""
