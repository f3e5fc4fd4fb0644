# ecampaign/routes.py

# JSON routes for the campaign platform.
# Handlers stay thin: read the request, call one workflow, jsonify the result.
# Failures surface as CampaignError and are rendered by the handler in __init__.

from flask import jsonify, request

from ecampaign import app, db, limiter
from ecampaign.audit.audit_logger import AuditLogger
from ecampaign.authentication.rbac import RBACService
from ecampaign.database.gateway import QueryGateway
from ecampaign.notifications.mailer import NotificationGateway
from ecampaign.operations import health_monitor
from ecampaign.security.input_validator import InputValidator
from ecampaign.workflows.accounts import AccountWorkflow
from ecampaign.workflows.admin import AdminWorkflow
from ecampaign.workflows.candidacy import CandidacyWorkflow
from ecampaign.workflows.content import ContentWorkflow
from ecampaign.workflows.ground import GroundWorkflow

# Shared services, built once at startup; only the audit logger carries state (its chain head, under a lock)
gateway = QueryGateway(db.session)
validator = InputValidator()
audit_logger = AuditLogger(
    log_dir=app.config['AUDIT_LOG_DIR'],
    key_path=app.config['AUDIT_SIGNING_KEY_PATH'],
)
mailer = NotificationGateway(
    api_key=app.config['SENDGRID_API_KEY'],
    sender=app.config['EMAIL_FROM'],
    sender_name=app.config['EMAIL_FROM_NAME'],
)
rbac_service = RBACService(gateway, validator)

accounts = AccountWorkflow(gateway, validator, mailer, audit_logger)
candidacy = CandidacyWorkflow(gateway, validator, rbac_service, audit_logger)
admin = AdminWorkflow(gateway, validator, rbac_service, audit_logger)
content = ContentWorkflow(gateway, validator, rbac_service, audit_logger)
ground = GroundWorkflow(gateway, validator)


def _body():
    return request.get_json(silent=True) or {}


# ---------- Service routes ----------

@app.route('/')
def home():
    return 'Civic Platform Backend Running'


@app.route('/env-test')
def env_test():
    return jsonify(health_monitor.check_config(app.config))


@app.route('/health')
def health():
    res = health_monitor.check_health(gateway, app.config)
    return jsonify(res), 200 if res['overall_ok'] else 503


@app.route('/ready')
def ready():
    res = health_monitor.check_readiness(gateway)
    return jsonify(res), 200 if res['overall_ok'] else 503


# ---------- Accounts ----------

@app.route('/register', methods=['POST'])
@limiter.limit("10/hour")
def register():
    return jsonify(accounts.register(_body()))


@app.route('/verify-email', methods=['POST'])
@limiter.limit("20/hour")
def verify_email():
    return jsonify(accounts.verify_email(_body()))


@app.route('/login', methods=['POST'])
@limiter.limit("30/hour")
def login():
    return jsonify(accounts.login(_body(), source_ip=request.remote_addr))


@app.route('/forgot-password', methods=['POST'])
@limiter.limit("5/hour")
def forgot_password():
    return jsonify(accounts.forgot_password(_body()))


@app.route('/reset-password', methods=['POST'])
@limiter.limit("20/hour")
def reset_password():
    return jsonify(accounts.reset_password(_body()))


# ---------- Candidacy ----------

@app.route('/apply-politician', methods=['POST'])
def apply_politician():
    return jsonify(candidacy.apply(_body()))


@app.route('/politicians')
def politicians():
    return jsonify(candidacy.list_verified())


@app.route('/politicians/all')
def politicians_all():
    return jsonify(candidacy.list_all())


@app.route('/politician/<profile_id>')
def politician_page(profile_id):
    return jsonify(candidacy.profile_page(profile_id))


@app.route('/my-politician-profile/<user_id>')
def my_politician_profile(user_id):
    return jsonify(candidacy.my_profile(user_id))


@app.route('/politician/add-promise', methods=['POST'])
def add_promise():
    return jsonify(candidacy.add_promise(_body()))


@app.route('/politician/add-achievement', methods=['POST'])
def add_achievement():
    return jsonify(candidacy.add_achievement(_body()))


@app.route('/politician/update-profile', methods=['POST'])
def update_profile():
    return jsonify(candidacy.update_profile(_body()))


# ---------- Admin ----------

@app.route('/admin/applications')
def admin_applications():
    return jsonify(admin.list_applications())


@app.route('/admin/approve-politician', methods=['POST'])
def approve_politician():
    return jsonify(admin.approve(_body()))


@app.route('/admin/reject-politician', methods=['POST'])
def reject_politician():
    return jsonify(admin.reject(_body()))


@app.route('/admin/users')
def admin_users():
    return jsonify(admin.list_users(request.args.get('admin_id')))


@app.route('/admin/user/<user_id>')
def admin_user(user_id):
    return jsonify(admin.get_user(request.args.get('admin_id'), user_id))


@app.route('/admin/audit-log')
def admin_audit_log():
    return jsonify(admin.audit_log(request.args.get('admin_id')))


# ---------- Manifestos, comments, ratings ----------

@app.route('/manifesto', methods=['POST'])
def post_manifesto():
    return jsonify(content.post_manifesto(_body()))


@app.route('/manifestos')
def manifestos():
    return jsonify(content.list_manifestos())


@app.route('/comment', methods=['POST'])
def post_comment():
    return jsonify(content.post_comment(_body()))


@app.route('/comments/<target_id>')
def comments(target_id):
    return jsonify(content.list_comments(target_id, request.args.get('target_type')))


@app.route('/rate', methods=['POST'])
def rate():
    return jsonify(content.rate(_body()))


@app.route('/ratings/<target_id>')
def ratings(target_id):
    return jsonify(content.rating_summary(target_id, request.args.get('target_type')))


# ---------- Ground updates ----------

@app.route('/ground-updates', methods=['GET', 'POST'])
def ground_updates():
    if request.method == 'POST':
        return jsonify(ground.post_update(_body()))
    return jsonify(ground.list_updates())


@app.route('/ground-like', methods=['POST'])
def ground_like():
    return jsonify(ground.like(_body()))


@app.route('/ground-comment', methods=['POST'])
def ground_comment():
    return jsonify(ground.comment(_body()))


@app.route('/ground-repost', methods=['POST'])
def ground_repost():
    return jsonify(ground.repost(_body()))


@app.route('/ground-comments/<ground_id>')
def ground_comments(ground_id):
    return jsonify(ground.list_comments(ground_id))


@app.route('/ground-likes/<ground_id>')
def ground_likes_count(ground_id):
    return jsonify(ground.count('likes', ground_id))


@app.route('/ground-comments-count/<ground_id>')
def ground_comments_count(ground_id):
    return jsonify(ground.count('comments', ground_id))


@app.route('/ground-reposts-count/<ground_id>')
def ground_reposts_count(ground_id):
    return jsonify(ground.count('reposts', ground_id))
