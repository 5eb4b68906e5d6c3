"""Store operations backend.

Organized by feature modules (cash, attendance, sales, ...) with a thin Flask
controller layer on top of service/repository layers.
"""
