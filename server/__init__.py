"""HTTP server for flowstudio."""
