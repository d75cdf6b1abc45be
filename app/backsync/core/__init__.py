"""Core comparison, verification and synchronization engine."""
