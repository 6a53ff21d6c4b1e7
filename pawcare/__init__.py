"""Health intelligence for pet care records.

This package computes derived views over a dog's care records: a composite
wellness score and a read-tracked notification feed. Storage is reached only
through the protocols in ``pawcare.services.repositories``.
"""
