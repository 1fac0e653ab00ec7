"""Utilities: structured logger and serialization helpers"""
