"""College ERP package.

This package is organized by feature modules (attendance, policies, payments, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
