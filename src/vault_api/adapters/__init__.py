"""
Adapter layer for the Vault API.

Contains the storage directory that backs uploads, listings and downloads.
"""
