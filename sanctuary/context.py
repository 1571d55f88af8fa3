from dataclasses import dataclass
from typing import Callable, Optional

from sanctuary.data.backend import Backend, Identity
from sanctuary.settings import Settings


@dataclass
class AppContext:
    settings: Settings
    backend: Backend
    identity: Identity
    navigate: Optional[Callable[[str], None]] = None
