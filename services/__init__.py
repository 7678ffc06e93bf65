"""services package"""

__all__ = [
    "analysis_gateway",
    "errors",
    "event_router",
    "id_generator",
    "logging_config",
    "presence_manager",
    "session_store",
    "ws_manager",
]
