from datetime import datetime
from typing import Any
from collections.abc import Callable


# Type aliases for Python dictionaries
type AppConfig = dict[str, Any]
type BackendConfig = dict[str, Any]
type Document = dict[str, Any]

# Type aliases for injectable runtime dependencies
type Clock = Callable[[], datetime]
type Sleeper = Callable[[float], None]
