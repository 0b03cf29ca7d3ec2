"""HTTP server mode: Slack events over HTTP plus a health endpoint."""
