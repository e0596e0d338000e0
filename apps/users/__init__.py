"""Users app package.

This module initializes the users app. It defines a custom user model with
the three marketplace roles (client, agent, admin) and the tour operator
profile attached to agent accounts. Use ``apps.users.models.CustomUser`` as
the AUTH_USER_MODEL throughout the project.
"""
