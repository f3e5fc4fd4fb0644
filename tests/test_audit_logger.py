import os
import json
import base64
import pytest
from ecampaign.audit.audit_logger import AuditLogger


@pytest.fixture
def temp_log_dir(tmp_path):
    """Create a temporary directory for test logs."""
    log_dir = tmp_path / "test_logs"
    log_dir.mkdir()
    return str(log_dir)


@pytest.fixture
def audit_logger(temp_log_dir):
    return AuditLogger(log_dir=temp_log_dir)


def test_init_creates_log_directory(temp_log_dir):
    os.rmdir(temp_log_dir)
    AuditLogger(log_dir=temp_log_dir)
    assert os.path.exists(temp_log_dir)


def test_log_event_basic(audit_logger, temp_log_dir):
    data = {"email": "a@x.com"}
    audit_logger.log_event("user_registered", data, user_id=7)

    log_file = os.path.join(temp_log_dir, 'audit.log')
    with open(log_file, 'r') as f:
        log_entry = json.loads(f.readline())

    assert log_entry['event_type'] == "user_registered"
    assert log_entry['data'] == data
    assert log_entry['user_id'] == 7
    assert 'timestamp' in log_entry
    assert 'hash' in log_entry
    assert 'signature' in log_entry
    assert log_entry['previous_hash'] is None  # First entry


def test_hash_chaining(audit_logger):
    audit_logger.log_event("application_submitted", {"application_id": 1})
    first_hash = audit_logger.previous_hash
    audit_logger.log_event("application_approved", {"application_id": 1})

    with open(audit_logger.log_file, 'r') as f:
        second_entry = json.loads(f.readlines()[1])
    assert second_entry['previous_hash'] == first_hash


def test_signature_verification(audit_logger):
    audit_logger.log_event("email_verified", {"email": "a@x.com"})

    with open(audit_logger.log_file, 'r') as f:
        entry = json.loads(f.readline())
    signature = entry.pop('signature')
    entry.pop('hash')
    entry_json = json.dumps(entry, sort_keys=True, default=str).encode()

    # raises InvalidSignature if the entry was not signed by this logger
    audit_logger.signing_key.public_key().verify(base64.b64decode(signature), entry_json)


def test_verify_log_integrity_valid(audit_logger):
    audit_logger.log_event("EVENT1", {"data": "first"})
    audit_logger.log_event("EVENT2", {"data": "second"})
    assert audit_logger.verify_log_integrity() is True


def test_verify_log_integrity_tampered(audit_logger):
    audit_logger.log_event("EVENT1", {"data": "first"})
    with open(audit_logger.log_file, 'a') as f:
        f.write('{"tampered": true}\n')
    assert audit_logger.verify_log_integrity() is False


def test_verify_log_integrity_edited_entry(audit_logger):
    audit_logger.log_event("failed_login", {"email": "a@x.com"})
    with open(audit_logger.log_file, 'r') as f:
        entry = json.loads(f.readline())
    entry['data']['email'] = 'b@x.com'
    with open(audit_logger.log_file, 'w') as f:
        f.write(json.dumps(entry) + "\n")
    assert audit_logger.verify_log_integrity() is False


def test_load_previous_hash(temp_log_dir):
    logger1 = AuditLogger(log_dir=temp_log_dir)
    logger1.log_event("EVENT1", {"data": "first"})

    logger2 = AuditLogger(log_dir=temp_log_dir)
    assert logger2.previous_hash == logger1.previous_hash


def test_read_entries_newest_first(audit_logger):
    for name in ("first", "second", "third"):
        audit_logger.log_event(name)
    assert [e['event_type'] for e in audit_logger.read_entries()] == ["third", "second", "first"]
    assert [e['event_type'] for e in audit_logger.read_entries(newest_first=False)][0] == "first"


def test_error_handling(audit_logger, monkeypatch):
    def mock_open(*args, **kwargs):
        raise PermissionError("Access denied")

    monkeypatch.setattr("builtins.open", mock_open)
    # must not raise
    audit_logger.log_event("ERROR_TEST", {"data": "test"})


def test_admin_audit_log_route(client, admin_id, register_user):
    voter = register_user()
    entries = client.get(f'/admin/audit-log?admin_id={admin_id}').get_json()
    event_types = [e['event_type'] for e in entries]
    assert 'email_verified' in event_types
    assert 'user_registered' in event_types

    assert client.get(f'/admin/audit-log?admin_id={voter}').status_code == 403


def test_concurrent_writers_keep_one_chain(audit_logger):
    import threading

    def write(worker):
        for i in range(50):
            audit_logger.log_event("login", {"worker": worker, "i": i})

    threads = [threading.Thread(target=write, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(audit_logger.read_entries()) == 400
    assert audit_logger.verify_log_integrity() is True


def test_chain_verifies_after_restart(temp_log_dir):
    first = AuditLogger(log_dir=temp_log_dir)
    first.log_event("user_registered", {"email": "a@x.com"})

    second = AuditLogger(log_dir=temp_log_dir)
    assert second.verify_log_integrity() is True
    second.log_event("email_verified", {"email": "a@x.com"})
    assert AuditLogger(log_dir=temp_log_dir).verify_log_integrity() is True


def test_signing_key_is_persisted(temp_log_dir, tmp_path):
    key_path = str(tmp_path / "keys.pem")
    first = AuditLogger(log_dir=temp_log_dir, key_path=key_path)
    assert os.path.exists(key_path)
    assert oct(os.stat(key_path).st_mode & 0o777) == oct(0o600)

    second = AuditLogger(log_dir=temp_log_dir, key_path=key_path)
    assert first.signing_key.public_key().public_bytes_raw() == second.signing_key.public_key().public_bytes_raw()


def test_different_key_fails_verification(temp_log_dir, tmp_path):
    AuditLogger(log_dir=temp_log_dir).log_event("EVENT1")
    stranger = AuditLogger(log_dir=temp_log_dir, key_path=str(tmp_path / "other.pem"))
    assert stranger.verify_log_integrity() is False
