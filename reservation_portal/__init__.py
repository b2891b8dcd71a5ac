"""Departmental equipment-reservation portal."""
