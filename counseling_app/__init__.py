"""
Counseling Booking API

A FastAPI-based backend for a counseling booking application, with
role-based accounts (client, psychologist, admin) and psychologist
weekly availability schedules.
"""

__version__ = "1.0.0"
