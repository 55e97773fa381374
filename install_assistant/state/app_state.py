"""
Process-wide application state.

``AppState`` is the single context object recording the current install
stage and the application's lifecycle signals. It is created once at
bootstrap by ``initialize_app_state`` and passed explicitly to the
components that need it; ``use_app_state`` is available to the outer
shell for lookups.
"""

import logging
from typing import Callable, Optional

from install_assistant.core.exceptions import AppStartError
from install_assistant.models.stage import InstallStage, InstallStageInfo, create_install_stage_info
from install_assistant.state.subscriptions import CallbackList, Subscription

logger = logging.getLogger(__name__)

StageCallback = Callable[[InstallStageInfo], None]


class OneShotSignal:
    """A lifecycle signal that fires at most once."""

    def __init__(self, name: str):
        self.name = name
        self.fired = False
        self._callbacks: CallbackList[None] = CallbackList(name)

    def connect(self, callback: Callable[[], None]) -> Optional[Subscription]:
        """
        Run ``callback`` when the signal fires. If it has already fired the
        callback runs immediately and no subscription is returned.
        """
        if self.fired:
            callback()
            return None
        return self._callbacks.subscribe(lambda _: callback())

    def emit(self) -> bool:
        """Fire the signal. Returns False (and does nothing) if already fired."""
        if self.fired:
            logger.debug("Signal %s already fired; ignoring", self.name)
            return False
        self.fired = True
        self._callbacks.dispatch(None)
        self._callbacks.clear()
        return True


class AppState:
    """
    Current install stage plus one-shot lifecycle signals.

    Stage updates come from a single writer (the bootstrap sequence);
    subscribers are notified synchronously, in registration order, and
    must not block.
    """

    def __init__(self):
        self.is_quitting = False
        self._install_stage = create_install_stage_info(InstallStage.IDLE, progress=0)
        self._stage_callbacks: CallbackList[InstallStageInfo] = CallbackList("install_stage")
        self._control_channel_ready = OneShotSignal("control_channel_ready")
        self._loaded = OneShotSignal("loaded")

    @property
    def install_stage(self) -> InstallStageInfo:
        """The latest install stage."""
        return self._install_stage

    @property
    def control_channel_ready(self) -> bool:
        return self._control_channel_ready.fired

    @property
    def loaded(self) -> bool:
        return self._loaded.fired

    def set_install_stage(self, info: InstallStageInfo) -> None:
        """Replace the current stage and notify subscribers."""
        previous = self._install_stage
        if info.stage != InstallStage.ERROR and info.stage.order < previous.stage.order:
            logger.warning(
                "Install stage moved backwards: %s -> %s", previous.stage.value, info.stage.value
            )
        self._install_stage = info
        logger.info(
            "Install stage: %s%s",
            info.stage.value,
            f" ({info.message})" if info.message else ""
        )
        self._stage_callbacks.dispatch(info)

    def reset_install_stage(self) -> None:
        """Return to the idle stage when the whole bootstrap restarts."""
        self.set_install_stage(create_install_stage_info(InstallStage.IDLE, progress=0))

    def subscribe_install_stage(self, callback: StageCallback) -> Subscription:
        return self._stage_callbacks.subscribe(callback)

    def on_control_channel_ready(self, callback: Callable[[], None]) -> Optional[Subscription]:
        return self._control_channel_ready.connect(callback)

    def on_loaded(self, callback: Callable[[], None]) -> Optional[Subscription]:
        return self._loaded.connect(callback)

    def emit_control_channel_ready(self) -> None:
        """Signal that the UI control channel handlers are registered."""
        self._control_channel_ready.emit()

    def emit_loaded(self) -> None:
        """Signal that the managed application has finished loading."""
        self._loaded.emit()

    def mark_quitting(self) -> None:
        self.is_quitting = True


_app_state: Optional[AppState] = None


def initialize_app_state() -> AppState:
    """
    Create the process-wide AppState.

    Raises:
        AppStartError: If called more than once
    """
    global _app_state
    if _app_state is not None:
        raise AppStartError("AppState already initialized")
    _app_state = AppState()
    return _app_state


def use_app_state() -> AppState:
    """
    Return the process-wide AppState.

    Raises:
        AppStartError: If ``initialize_app_state`` has not been called
    """
    if _app_state is None:
        raise AppStartError("AppState not initialized")
    return _app_state
