"""
Data access layer.

Each repository is a thin wrapper around parameterised SQL for one
table (plus the joins its callers need).  Repositories return plain
dictionaries; converting them to API schemas and enforcing business
rules is left to the service layer.
"""
