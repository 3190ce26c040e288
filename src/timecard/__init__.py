"""timecard package.

Attendance tracking with late/early-departure pay cuts, overtime requests
and admin reporting. Organized by feature modules (attendance, overtime,
payroll, ...) with a thin Flask controller layer over service/repository
layers.
"""
