"""LangGraph workflow evaluating one scenario submission."""

from datetime import date
from typing import Callable, Optional, Protocol, Union

from langgraph.graph import StateGraph, END
from pydantic import BaseModel, Field

from ..agents.models import EvaluationResult
from ..models.projection import BusinessMetrics, PolicyMetrics
from ..models.submission import ScenarioSubmission
from ..templates import ScenarioTemplate


class Evaluator(Protocol):
    """Anything that turns a prompt into raw AI text."""

    def run(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        ...


class EvaluationState(BaseModel):
    """State passed through the evaluation graph."""

    submission: ScenarioSubmission
    today: Optional[date] = Field(default=None, description="Injected evaluation date")
    metrics: Optional[Union[BusinessMetrics, PolicyMetrics]] = None
    prompt: str = ""
    raw_response: str = ""
    result: Optional[EvaluationResult] = None
    current_phase: str = Field(default="input", description="Current pipeline phase")


class EvaluationWorkflow:
    """
    LangGraph-based evaluation of a single submission.

    Pipeline phases:
    1. Projection - trusted metrics from cards and year parameters
    2. Synthesis - deterministic prompt rendering
    3. Evaluation - the one AI call
    4. Normalization - structured result with trusted metrics merged in

    Errors raised by any phase propagate to the caller unchanged.
    """

    def __init__(
        self,
        template: ScenarioTemplate,
        evaluator: Evaluator,
        log: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            template: Scenario template being evaluated.
            evaluator: AI collaborator.
            log: Optional progress callback.
        """
        self.template = template
        self.evaluator = evaluator
        self._log = log or (lambda message: None)

        self.graph = self._build_graph()

    def _build_graph(self):
        """Build the LangGraph state graph."""
        graph = StateGraph(EvaluationState)

        graph.add_node("projection", self._run_projection)
        graph.add_node("synthesis", self._run_synthesis)
        graph.add_node("evaluation", self._run_evaluation)
        graph.add_node("normalization", self._run_normalization)

        graph.set_entry_point("projection")
        graph.add_edge("projection", "synthesis")
        graph.add_edge("synthesis", "evaluation")
        graph.add_edge("evaluation", "normalization")
        graph.add_edge("normalization", END)

        return graph.compile()

    def _run_projection(self, state: EvaluationState) -> dict:
        self._log("Phase 1: Projection...")
        submission = state.submission
        metrics = self.template.build_metrics(submission.selection, submission.projection)
        return {"metrics": metrics, "current_phase": "projection"}

    def _run_synthesis(self, state: EvaluationState) -> dict:
        self._log("Phase 2: Prompt synthesis...")
        prompt = self.template.synthesize_prompt(state.submission, state.metrics, state.today)
        return {"prompt": prompt, "current_phase": "synthesis"}

    def _run_evaluation(self, state: EvaluationState) -> dict:
        self._log(f"Phase 3: AI evaluation ({len(state.prompt)} character prompt)...")
        raw = self.evaluator.run(state.prompt, system_prompt=self.template.system_prompt)
        return {"raw_response": raw, "current_phase": "evaluation"}

    def _run_normalization(self, state: EvaluationState) -> dict:
        self._log(f"Phase 4: Normalization ({len(state.raw_response)} character response)...")
        result = self.template.normalize(state.raw_response, state.submission, state.metrics)
        return {"result": result, "current_phase": "complete"}

    def run(self, submission: ScenarioSubmission, today: Optional[date] = None) -> EvaluationState:
        """
        Execute the full workflow.

        Args:
            submission: Frozen scenario snapshot.
            today: Evaluation date for the prompt.

        Returns:
            Final EvaluationState with the normalized result.
        """
        initial_state = EvaluationState(submission=submission, today=today)

        final_state = self.graph.invoke(initial_state)

        # LangGraph may hand back a plain dict of channel values
        if isinstance(final_state, dict):
            final_state = EvaluationState.model_validate(final_state)
        return final_state
