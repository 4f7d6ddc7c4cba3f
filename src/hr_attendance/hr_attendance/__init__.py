"""HR Attendance package.

Organized by feature modules (employees, settings, holidays, attendance)
with a thin Flask controller layer over service/repository layers.
"""
