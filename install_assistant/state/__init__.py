from install_assistant.state.app_state import (
    AppState,
    OneShotSignal,
    initialize_app_state,
    use_app_state,
)
from install_assistant.state.subscriptions import CallbackList, Subscription

__all__ = [
    "AppState",
    "OneShotSignal",
    "initialize_app_state",
    "use_app_state",
    "CallbackList",
    "Subscription",
]
