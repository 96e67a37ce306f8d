"""Data models — sub-repository config, package references and descriptors."""
