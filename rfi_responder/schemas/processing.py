"""Pipeline progress schemas."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessingStep(str, Enum):
    """Pipeline states in happy-path order, plus the terminal error state."""
    PREPARATION = "preparation"
    EXTRACTION = "extraction"
    QUESTIONS = "questions"
    ANALYSIS = "analysis"
    COMPLETE = "complete"
    ERROR = "error"


HAPPY_PATH: List[ProcessingStep] = [
    ProcessingStep.PREPARATION,
    ProcessingStep.EXTRACTION,
    ProcessingStep.QUESTIONS,
    ProcessingStep.ANALYSIS,
    ProcessingStep.COMPLETE,
]

STEP_PROGRESS: Dict[ProcessingStep, int] = {
    step: index * 100 // (len(HAPPY_PATH) - 1) for index, step in enumerate(HAPPY_PATH)
}

ERROR_PROGRESS = 0


class ProcessingStatus(BaseModel):
    """Observable progress of one document's pipeline run."""

    current_step: ProcessingStep = Field(default=ProcessingStep.PREPARATION, alias="currentStep")
    completed_steps: List[ProcessingStep] = Field(default_factory=list, alias="completedSteps")
    progress: int = Field(default=0, ge=0, le=100)
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_terminal(self) -> bool:
        return self.current_step in (ProcessingStep.COMPLETE, ProcessingStep.ERROR)
