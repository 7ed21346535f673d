"""Services for verifying, extracting and notifying about checkout events."""
