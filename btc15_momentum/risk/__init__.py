"""Bet sizing."""
