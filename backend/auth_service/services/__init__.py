"""Service layer.

Sub-packages
------------
- :mod:`auth_service.services.tokens`: token lifecycle boundary (issue, verify,
  rotate, revoke).
- :mod:`auth_service.services.auth`: session lifecycle orchestration
  (register, login, refresh, logout, self).
- :mod:`auth_service.services._shared`: base service, domain errors and ports.
"""
