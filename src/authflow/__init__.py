"""authflow package.

OTP-gated identity and attendance backend, organized by feature modules
(users, otp, attendance, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
