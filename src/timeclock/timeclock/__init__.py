"""Time-clock package.

Organized like the other feature-module services: a domain layer
(working sessions, time trackings), a repository layer over MySQL, a service
layer holding the working-session state machine and a thin Flask controller.
"""
