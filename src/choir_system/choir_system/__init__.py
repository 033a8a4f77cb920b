"""Choir management API.

This package is organized by feature modules (users, attendance, permissions, ...)
with a thin Flask controller layer over service/repository layers.
"""
