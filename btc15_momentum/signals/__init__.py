"""Momentum signal."""
