# ecampaign/workflows/admin.py
"""Admin-gated operations: application review and user inspection.

Approval touches three tables. They are written inside one database
transaction, and every step checks the current state before writing, so a
retry after a failed attempt converges on the same end state:

    users.role = 'politician'
    politician_profiles[user_id] upserted with is_verified = true
    politician_applications.status = 'approved'
"""

import logging

from ecampaign.authentication.rbac import Permission, UserRole
from ecampaign.database.models import PoliticianApplication, PoliticianProfile, User
from ecampaign.errors import ConflictError, NotFoundError, ValidationError
from ecampaign.workflows.candidacy import profile_values_from_application

logger = logging.getLogger(__name__)

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'

ADMIN_USER_FIELDS = ('id', 'username', 'email', 'role', 'is_active', 'email_verified', 'created_at')


class AdminWorkflow:
    def __init__(self, gateway, validator, rbac, audit_logger):
        self.gateway = gateway
        self.validator = validator
        self.rbac = rbac
        self.audit = audit_logger

    def _review_request(self, data):
        """Authorise the caller first, then read the application id."""
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        admin = self.rbac.require_admin(data.get('admin_id'))
        (application_id,) = self.validator.require_fields(
            data, ['application_id'], "Application ID required")
        return self.validator.validate_id(application_id, 'application_id'), admin.id

    def list_applications(self):
        applications = self.gateway.find_all(PoliticianApplication, order_by='created_at', descending=True)
        result = []
        for application in applications:
            row = application.to_dict('id', 'full_name', 'seat', 'county', 'party', 'fee', 'status', 'user_id')
            row['users'] = application.user.to_dict('email', 'username') if application.user else None
            result.append(row)
        return result

    def approve(self, data):
        application_id, admin_id = self._review_request(data)

        with self.gateway.transaction():
            application = self.gateway.find_one(PoliticianApplication, id=application_id)
            if application is None:
                raise NotFoundError("Application not found")
            if application.status != STATUS_PENDING:
                raise ConflictError("Invalid application")

            applicant = self.gateway.find_one(User, id=application.user_id)
            if applicant is None:
                raise NotFoundError("Applicant not found")
            if applicant.role != UserRole.POLITICIAN.value:
                self.gateway.update(User, {'role': UserRole.POLITICIAN.value}, id=applicant.id)

            self.gateway.upsert(PoliticianProfile, {'user_id': applicant.id},
                                profile_values_from_application(application))
            self.gateway.update(PoliticianApplication, {'status': STATUS_APPROVED}, id=application_id)
            applicant_id = applicant.id

        logger.info("Application %s approved by admin %s", application_id, admin_id)
        self.audit.log_event('application_approved',
                             {'application_id': application_id, 'applicant_id': applicant_id},
                             user_id=admin_id)
        return {'message': "Approved"}

    def reject(self, data):
        application_id, admin_id = self._review_request(data)

        with self.gateway.transaction():
            application = self.gateway.find_one(PoliticianApplication, id=application_id)
            if application is None:
                raise NotFoundError("Application not found")
            if application.status == STATUS_APPROVED:
                raise ConflictError("Application has already been approved")
            if application.status != STATUS_REJECTED:
                self.gateway.update(PoliticianApplication, {'status': STATUS_REJECTED}, id=application_id)

        self.audit.log_event('application_rejected', {'application_id': application_id}, user_id=admin_id)
        return {'message': "Rejected"}

    def list_users(self, admin_id):
        self.rbac.require_permission(admin_id, Permission.MANAGE_USERS, "Admin only")
        users = self.gateway.find_all(User, order_by='created_at', descending=True)
        return [u.to_dict(*ADMIN_USER_FIELDS) for u in users]

    def get_user(self, admin_id, user_id):
        self.rbac.require_permission(admin_id, Permission.MANAGE_USERS, "Admin only")
        user_id = self.validator.validate_id(user_id, 'user_id')
        user = self.gateway.find_one(User, id=user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.to_dict(*ADMIN_USER_FIELDS)

    def audit_log(self, admin_id):
        self.rbac.require_permission(admin_id, Permission.MANAGE_USERS, "Admin only")
        return self.audit.read_entries()
