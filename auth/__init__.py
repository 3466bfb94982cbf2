"""
auth — Account and credential module.

Provides:
  • Account store (signup persistence, username lookup)
  • Password hashing (bcrypt)
  • Credential authenticator
  • JWT issuance & validation (PyJWT, HMAC)
  • Signup / Login / Me API routes
"""
