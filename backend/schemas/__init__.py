# Schemas package
from .common import MessageResponse
from .dashboard import DashboardResponse
from .health import HealthResponse
from .sessions import SessionEnvelope, SessionListResponse, SessionResponse
from .stations import StationEnvelope, StationListResponse, StationResponse

__all__ = [
    "DashboardResponse",
    "HealthResponse",
    "MessageResponse",
    "SessionEnvelope",
    "SessionListResponse",
    "SessionResponse",
    "StationEnvelope",
    "StationListResponse",
    "StationResponse",
]
