"""
Configuration management for the Vault API.

Contains the Pydantic settings shared by the server, the upload client and the CLI.
"""
