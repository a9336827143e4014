"""
Backend package for the site CMS API.

Public read endpoints for events and news, admin CRUD, a contact inbox,
administrator accounts, image uploads and JSON backup/restore. All state
lives in JSON files on local disk.
"""
