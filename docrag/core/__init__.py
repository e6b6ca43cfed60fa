"""Core domain, ports, and services (no I/O)."""
