# accounts/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Default (protected) admin creation
- db: Database configuration and connection management
- errors: Error taxonomy mapped to HTTP responses
- security: Password hashing and JWT issuance/verification
- validators: National ID (cédula/RIF) and phone number format rules
"""
