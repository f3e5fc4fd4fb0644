# ecampaign/errors.py
"""Error taxonomy shared by the workflows and the HTTP layer.

Every workflow failure is raised as a subclass of CampaignError. The Flask
error handler registered in ecampaign/__init__.py turns it into a JSON body
of the form {"error": message} with the class' status code.

Exception hierarchy:
- CampaignError: base class, 500
  - ValidationError: missing or invalid input fields, 400
  - ConflictError: duplicate registration or application, illegal state, 400
  - AuthError: bad credentials, 401
    - ForbiddenError: suspended account, unverified email, wrong role, 403
  - NotFoundError: missing user/application/profile/target row, 404
  - DownstreamError: database or external service failure, 500
"""


class CampaignError(Exception):
    """Base exception for all request-level failures."""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(CampaignError):
    """Raised when request fields are missing or malformed."""
    status_code = 400


class ConflictError(CampaignError):
    """Raised when a write would duplicate a row or break a state transition."""
    status_code = 400


class AuthError(CampaignError):
    """Raised when credentials do not match."""
    status_code = 401


class ForbiddenError(AuthError):
    """Raised when the caller is known but not allowed to proceed."""
    status_code = 403


class NotFoundError(CampaignError):
    """Raised when a referenced row does not exist."""
    status_code = 404


class DownstreamError(CampaignError):
    """Raised when the database or another service fails; message is forwarded verbatim."""
    status_code = 500
