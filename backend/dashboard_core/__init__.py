# Dashboard core: authorization gate, identity tokens, aggregation engine
from dashboard_core.aggregation import SessionRecord, StationRecord, build_dashboard, relative_time
from dashboard_core.auth import AuthDecision, Identity, Role, check_role, require_admin, require_authenticated

__all__ = [
    "AuthDecision",
    "Identity",
    "Role",
    "SessionRecord",
    "StationRecord",
    "build_dashboard",
    "check_role",
    "relative_time",
    "require_admin",
    "require_authenticated",
]
