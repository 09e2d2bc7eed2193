"""Control-plane HTTP backend."""

from .client import ControlPlaneClient, trace_exchange
from .executor import ControlPlaneSQLExecutor

__all__ = ["ControlPlaneClient", "ControlPlaneSQLExecutor", "trace_exchange"]
