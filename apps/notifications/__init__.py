"""Notifications app package.

In-app notifications for users and the Celery task that delivers e-mail.
"""
