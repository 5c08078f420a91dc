"""Users app package.

Defines the custom user model with email login and the three platform
roles (guest, host, manager). Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
