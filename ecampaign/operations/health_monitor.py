# ecampaign/operations/health_monitor.py
# Liveness/Readiness health checks (DB, disk, configuration)

import os
import shutil
from typing import Dict

from ecampaign.errors import DownstreamError

MIN_FREE_DISK_GB = float(os.getenv("MIN_FREE_DISK_GB", "1"))


def _check_db(gateway) -> Dict:
    try:
        gateway.ping()
        return {"ok": True, "detail": "database reachable"}
    except DownstreamError as e:
        return {"ok": False, "error": e.message}


def _check_disk(path=".") -> Dict:
    total, used, free = shutil.disk_usage(path)
    free_gb = free / (1024**3)
    return {"ok": free_gb >= MIN_FREE_DISK_GB, "free_gb": round(free_gb, 2), "min_required_gb": MIN_FREE_DISK_GB}


def check_config(config) -> Dict:
    """Report which collaborators are configured, never their values."""
    return {
        "hasUrl": bool(config.get("SQLALCHEMY_DATABASE_URI")),
        "hasKey": bool(config.get("SENDGRID_API_KEY")),
        "hasSender": bool(config.get("EMAIL_FROM")),
    }


def check_readiness(gateway) -> Dict:
    db = _check_db(gateway)
    return {"db": db, "overall_ok": db["ok"]}


def check_health(gateway, config) -> Dict:
    """Aggregate overall system health. Missing mail config degrades, it does not fail."""
    db = _check_db(gateway)
    disk = _check_disk(config.get("AUDIT_LOG_DIR") or ".")
    return {"db": db, "disk": disk, "config": check_config(config), "overall_ok": db["ok"] and disk["ok"]}
