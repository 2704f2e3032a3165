from .record_store import RecordStore
from .session_gate import AccessDenied, SessionGate
from .storage_service import Collection, StorageGateway

# Streamlit-facing glue lives in core.session_manager; nothing here imports streamlit.

__all__ = ["AccessDenied", "Collection", "RecordStore", "SessionGate", "StorageGateway"]
