"""Reservation lifecycle, query and admin decision services."""
