# ecampaign/audit/audit_logger.py

import os
import json
import hashlib
import base64
import logging
import threading
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ecampaign.operations.clock import utcnow

# Append-only audit trail for account and candidacy workflows.
# Entries are hash-chained (SHA-256 over the previous entry) and Ed25519-signed,
# so a removed or edited line breaks verify_log_integrity().
#
# The signing key is kept in a PEM file so the chain stays verifiable across
# restarts. One instance is shared by all request threads; the read of
# previous_hash through the append is serialised by a lock.

logger = logging.getLogger(__name__)

KEY_FILENAME = 'audit_signing_key.pem'


def load_or_create_signing_key(key_path):
    """Load the Ed25519 key at `key_path`, generating and saving one on first use."""
    if os.path.exists(key_path):
        with open(key_path, 'rb') as f:
            key = serialization.load_pem_private_key(f.read(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError(f"{key_path} does not hold an Ed25519 private key")
        return key

    key = Ed25519PrivateKey.generate()
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption())
    fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, 'wb') as f:
        f.write(pem)
    logger.info("Generated audit signing key at %s", key_path)
    return key


class AuditLogger:
    def __init__(self, log_dir='logs', key_path=None):
        self.log_dir = log_dir
        self.log_file = os.path.join(log_dir, 'audit.log')
        self.previous_hash = None
        self._lock = threading.Lock()

        os.makedirs(log_dir, exist_ok=True)

        self.key_path = key_path or os.path.join(log_dir, KEY_FILENAME)
        self.signing_key = load_or_create_signing_key(self.key_path)
        self._load_previous_hash()

    def _load_previous_hash(self):
        if os.path.exists(self.log_file):
            with open(self.log_file, 'r') as f:
                lines = [line for line in f.readlines() if line.strip()]
            if lines:
                try:
                    self.previous_hash = json.loads(lines[-1]).get('hash')
                except ValueError:
                    self.previous_hash = None

    def log_event(self, event_type, data=None, user_id=None):
        """Append one signed entry; failures are logged and never reach the request."""
        try:
            with self._lock:
                self._append(event_type, data, user_id)
        except Exception as e:
            logger.error("Audit log error: %s", e)

    def _append(self, event_type, data, user_id):
        # caller holds self._lock
        log_entry = {
            "timestamp": utcnow().isoformat(),
            "event_type": event_type,
            "data": data or {},
            "user_id": user_id,
            "previous_hash": self.previous_hash,
        }
        entry_json = json.dumps(log_entry, sort_keys=True, default=str)
        entry_hash = hashlib.sha256(entry_json.encode()).hexdigest()

        signature = self.signing_key.sign(entry_json.encode())
        log_entry['hash'] = entry_hash
        log_entry['signature'] = base64.b64encode(signature).decode()

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(log_entry, default=str) + "\n")

        self.previous_hash = entry_hash

    def verify_log_integrity(self):
        if not os.path.exists(self.log_file):
            return True
        public_key = self.signing_key.public_key()
        previous_hash = None
        try:
            with open(self.log_file, 'r') as f:
                for line in f:
                    if not line.strip():
                        continue
                    log_entry = json.loads(line)
                    if log_entry.get('previous_hash') != previous_hash:
                        return False
                    entry_copy = dict(log_entry)
                    signature = base64.b64decode(entry_copy.pop('signature'))
                    entry_hash = entry_copy.pop('hash')
                    entry_json = json.dumps(entry_copy, sort_keys=True, default=str).encode()
                    if hashlib.sha256(entry_json).hexdigest() != entry_hash:
                        return False
                    public_key.verify(signature, entry_json)
                    previous_hash = entry_hash
            return True
        except Exception:
            return False

    def read_entries(self, newest_first=True):
        entries = []
        if not os.path.exists(self.log_file):
            return entries
        with open(self.log_file, 'r') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except ValueError:
                    entries.append({'raw': line})
        return list(reversed(entries)) if newest_first else entries
