"""Storage credential and media resolution service.

Connects third-party cloud drives (Google Drive, Dropbox) to user profiles,
keeps their OAuth credentials usable, and resolves post media references
into publishable artifacts.
"""
