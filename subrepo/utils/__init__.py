"""Collaborators for the sync engine — git, pnpm, subprocesses and symlinks."""
