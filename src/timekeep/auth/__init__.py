"""Authentication, role and route checks."""
