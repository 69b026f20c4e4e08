"""Relay business logic (no I/O beyond the outbound HTTP client).

- splitter.py (partition a webhook payload into firing/resolved groups)
- forwarder.py (POST groups downstream with per-config query params)
"""

# Import side-effects are intentionally avoided here; modules are imported by routers as needed.
