"""
Document-store access for the portal.

Every entity lives in its own DynamoDB table keyed by a single string
attribute; this package provides the shared repository and one
sub-package per resource.
"""
