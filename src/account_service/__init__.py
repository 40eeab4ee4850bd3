"""Account Service package.

User-account management (register, lookup, update, delete, password reset)
organized as a feature module with a thin Flask controller layer on top of
service/repository layers.
"""
