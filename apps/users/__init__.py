"""Users app package.

Holds the admin and team accounts, the server-side sessions they log in
with and the identity gate that turns a presented credential into a role
and an accommodation scope. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
