"""Islands: a two-player island-guessing game engine."""

from islands_engine.engine import *  # noqa: F401,F403
from islands_engine.engine import __all__ as _engine_all
from islands_engine.engine.instrumented_session import InstrumentedGameSession

__all__ = [*_engine_all, "InstrumentedGameSession"]
__version__ = "0.1.0"
