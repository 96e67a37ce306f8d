"""Incremental sync engine for sub-repositories.

This package provides the primitives for:
- Ref resolution: deciding which commit a sub-repo should be at
- Repo sync: cloning, fetching and resetting working trees
- Head tracking: persisted per-package commit hashes to skip unchanged work
- Package processing: install, build and link each package unit
- Inheritance: re-exposing a sub-repo's dependencies to the host
"""
