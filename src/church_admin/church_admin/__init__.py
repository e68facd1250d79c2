"""Church administration core package.

Organized by feature modules (rbac, registrations, transfers, ...) with a thin
Flask controller layer on top of service/repository layers.
"""
