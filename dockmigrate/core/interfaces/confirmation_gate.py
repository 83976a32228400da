from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models import MigrationCheckpoint


class GateDecision(str, Enum):
    PROCEED = "proceed"
    SUSPEND = "suspend"
    CANCEL = "cancel"


class ConfirmationGate(ABC):
    """Operator checkpoint between staging artifacts and touching the remote host"""

    @abstractmethod
    async def decide(self, checkpoint: 'MigrationCheckpoint') -> GateDecision:
        pass
