"""Infrastructure — the backing stores, backups, and subprocess probes."""
