"""Core installer logic: host probing, provisioning, fetching, services."""
