"""Contacts app package: the public contact form and its admin inbox."""
