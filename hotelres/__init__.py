"""Reservation management backend for a small hotel."""
