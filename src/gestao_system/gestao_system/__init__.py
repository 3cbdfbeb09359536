"""Gestão System package.

Backend for a service business: time-clock imports, daily attendance
calculation, exports and records, organized by feature modules with a thin
Flask controller layer over service/repository layers.
"""
