"""
Pipeline job state.

A job only moves forward through its stages. ``done`` and ``failed`` are
terminal; a new trigger creates a new job.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..schemas import TriggerRequest


class Stage(str, Enum):
    PENDING = "pending"
    RETRIEVING = "retrieving"
    INFERRING = "inferring"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"


STAGE_ORDER = [
    Stage.PENDING,
    Stage.RETRIEVING,
    Stage.INFERRING,
    Stage.PERSISTING,
    Stage.NOTIFYING,
    Stage.DONE,
]

TERMINAL_STAGES = (Stage.DONE, Stage.FAILED)


class InvalidStageTransition(Exception):
    """Raised when a job would move backward or leave a terminal stage."""


class PipelineJob(BaseModel):
    """Unit of work owned by one orchestrator run"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    trigger: TriggerRequest
    stage: Stage = Stage.PENDING
    stage_deadlines: Dict[Stage, float] = Field(default_factory=dict, description="Seconds allowed per stage")
    last_error: Optional[str] = None
    history: List[Stage] = Field(default_factory=lambda: [Stage.PENDING])
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STAGES

    def advance(self, stage: Stage) -> None:
        """Move to a later stage; any stage may fail, nothing moves after a terminal stage."""
        if self.is_terminal:
            raise InvalidStageTransition(f"Job {self.id} is {self.stage.value} and cannot move to {stage.value}")
        if stage != Stage.FAILED and STAGE_ORDER.index(stage) <= STAGE_ORDER.index(self.stage):
            raise InvalidStageTransition(f"Job {self.id} cannot move from {self.stage.value} to {stage.value}")
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: str) -> None:
        self.advance(Stage.FAILED)
        self.last_error = error
