"""
PowerShield collection names.
"""

USERS = "users"
GALLERY = "gallery"
CONTACTS = "contacts"
JOBS = "jobs"
JOB_APPLICATIONS = "job_applications"
ADMIN_USERS = "admin_users"
