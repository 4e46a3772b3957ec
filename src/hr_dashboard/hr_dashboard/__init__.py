"""HR Dashboard package.

This package is organized by feature modules (attendance, payroll, navigation,
scheduling, ...) around one SessionController per logged-in user, with a thin
Flask adapter in front of it.
"""
