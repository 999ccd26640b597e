"""Service layer for mongobackup."""
