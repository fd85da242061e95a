"""
Scenario session: the surface the UI drives.

A session walks one team through card selection, projection editing,
evaluation and saving. All of its state lives in a serializable
SessionState that can be written to a SessionStore between screens.
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..agents.models import EvaluationResult
from ..errors import (
    MalformedAIResponse,
    PersistenceFailed,
    SubmissionInProgress,
    ValidationError,
)
from ..models.card import Card
from ..models.projection import MonthlyMetrics, YearParameter, YearResult
from ..models.submission import Participant, PolicyTargets, ScenarioSubmission, SelectionSet
from ..persistence.registry import PlanRegistry, SaveReceipt, build_summary
from ..persistence.session_store import SessionStore
from ..projection import engine
from ..selection.catalog import CardCatalog, load_catalog
from ..selection.state_machine import SelectionState, SelectionStateMachine
from ..templates import ScenarioTemplate, business_base_inputs, business_initial_years, get_template
from .workflow import EvaluationWorkflow, Evaluator


class SessionState(BaseModel):
    """Everything one participant's session knows, in serializable form."""

    template: str
    participant: Participant = Field(default_factory=Participant)
    targets: Optional[PolicyTargets] = None
    selection: SelectionState
    catalog: dict[str, list[Card]] = Field(default_factory=dict, description="Category key -> cards")
    year_params: list[YearParameter] = Field(default_factory=list)
    growth_rate: float = engine.DEFAULT_GROWTH_RATE
    free_text: dict[str, str] = Field(default_factory=dict, description="Last submitted inputs")
    submission: Optional[ScenarioSubmission] = None
    result: Optional[EvaluationResult] = None
    save_receipt: Optional[SaveReceipt] = None


class ScenarioSession:
    """
    One team's pass through a scenario template.

    Collaborators (catalog, evaluator, registry) are injected so that the
    session itself never talks to the network directly.
    """

    def __init__(
        self,
        template: Union[ScenarioTemplate, str],
        participant: Optional[Participant] = None,
        targets: Optional[PolicyTargets] = None,
        catalog: Optional[CardCatalog] = None,
        evaluator: Optional[Evaluator] = None,
        registry: Optional[PlanRegistry] = None,
        state: Optional[SessionState] = None,
        verbose: bool = False,
    ):
        """
        Args:
            template: Template descriptor or its name.
            participant: Team information; the team name is required.
            targets: Policy goals (policy template only; defaults apply).
            catalog: Card source used by load_catalog.
            evaluator: AI collaborator used by submit.
            registry: Plan registry used by save.
            state: Previously serialized state to resume from.
            verbose: Whether to print progress updates.
        """
        self.template = get_template(template) if isinstance(template, str) else template
        self.catalog = catalog
        self.evaluator = evaluator
        self.registry = registry
        self.verbose = verbose
        self._submitting = False

        if state is None:
            participant = participant or Participant()
            if not participant.team_name.strip():
                raise ValidationError("team_name", "Enter a team name")
            if self.template.has_targets and targets is None:
                targets = PolicyTargets()
            state = SessionState(
                template=self.template.name,
                participant=participant,
                targets=targets if self.template.has_targets else None,
                selection=SelectionState(categories=self.template.category_keys()),
            )
        elif state.template != self.template.name:
            raise ValueError(f"Session belongs to template '{state.template}'")

        self._state = state
        self._machine = SelectionStateMachine(
            self.template.category_keys(),
            suits=self.template.suits(),
            state=state.selection,
        )

    def _log(self, message: str):
        """Print message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    # -------------------------------------------------------------------------
    # Catalog and selection
    # -------------------------------------------------------------------------

    @property
    def catalog_loaded(self) -> bool:
        return bool(self._state.catalog)

    def load_catalog(self) -> dict[str, list[Card]]:
        """
        Fetch every category's cards once per session.

        Raises:
            CatalogUnavailable: Any category failed; nothing is kept.
        """
        if self.catalog_loaded:
            return self._state.catalog
        if self.catalog is None:
            raise ValueError("No card catalog configured")

        self._log(f"Loading {self.template.title} cards...")
        self._state.catalog = load_catalog(self.catalog, self.template.suits(), log=self._log)
        return self._state.catalog

    def cards(self, category: str) -> list[Card]:
        return list(self._state.catalog.get(category, []))

    def find_card(self, category: str, card_id: str) -> Card:
        for card in self._state.catalog.get(category, []):
            if card.id == card_id:
                return card
        raise ValueError(f"No card '{card_id}' in category '{category}'")

    def get_state(self) -> SelectionState:
        return self._machine.get_state()

    def _require_catalog(self):
        if not self.catalog_loaded:
            raise ValueError("Card catalog not loaded: call load_catalog() before selecting cards")

    def select_card(self, category: str, card: Union[Card, str]) -> SelectionState:
        """Choose a card (or a card id from the loaded catalog) for a category."""
        self._require_catalog()
        if isinstance(card, str):
            card = self.find_card(category, card)
        return self._machine.select_card(category, card)

    def advance(self) -> SelectionState:
        self._require_catalog()
        return self._machine.advance()

    def retreat(self) -> SelectionState:
        self._require_catalog()
        return self._machine.retreat()

    def jump_to(self, index: int) -> SelectionState:
        self._require_catalog()
        return self._machine.jump_to(index)

    def finalize(self) -> SelectionSet:
        self._require_catalog()
        return self._machine.finalize()

    # -------------------------------------------------------------------------
    # Projection
    # -------------------------------------------------------------------------

    @property
    def year_params(self) -> list[YearParameter]:
        return list(self._state.year_params)

    def monthly_metrics(self) -> MonthlyMetrics:
        """Single-month figures straight from the selected cards."""
        return engine.compute_monthly(*business_base_inputs(self.finalize()))

    def initialize_projection(self, growth_rate: Optional[float] = None) -> list[YearResult]:
        """
        Seed the five-year table from the cards.

        Existing parameters are kept; call reset_projection to start over.
        """
        if not self.template.has_projection:
            raise ValueError(f"Template '{self.template.name}' has no financial projection")
        if growth_rate is not None:
            self._state.growth_rate = growth_rate
        if not self._state.year_params:
            self._state.year_params = business_initial_years(self.finalize(), self._state.growth_rate)
        return self.projection_results()

    def reset_projection(self, growth_rate: Optional[float] = None) -> list[YearResult]:
        self._state.year_params = []
        return self.initialize_projection(growth_rate)

    def projection_results(self) -> list[YearResult]:
        return engine.compute_projection(self._state.year_params)

    def update_year(self, year: int, field: str, value: float) -> list[YearResult]:
        """Edit one cell of the projection; other years are untouched."""
        try:
            self._state.year_params = engine.update_year(self._state.year_params, year, field, value)
        except ValueError as e:
            raise ValidationError(field, str(e)) from e
        return self.projection_results()

    def apply_growth_rate(self, rate: float) -> list[YearResult]:
        """Recompute sales for every year from year 1 at the given rate."""
        self._state.growth_rate = rate
        self._state.year_params = engine.apply_growth_rate(self._state.year_params, rate)
        return self.projection_results()

    def recompute_projection(self, year_params: list[YearParameter]) -> list[YearResult]:
        """
        Replace the projection parameters and return their results.

        Raises:
            ValidationError: A parameter is out of range; nothing is replaced.
        """
        try:
            params = [YearParameter.model_validate(p) for p in year_params]
        except PydanticValidationError as e:
            raise ValidationError("year_params", str(e)) from e
        self._state.year_params = params
        return self.projection_results()

    # -------------------------------------------------------------------------
    # Evaluation and saving
    # -------------------------------------------------------------------------

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def result(self):
        return self._state.result

    @property
    def save_receipt(self) -> Optional[SaveReceipt]:
        return self._state.save_receipt

    def _clean_free_text(self, free_text: dict[str, str]) -> dict[str, str]:
        cleaned = {}
        for text_field in self.template.free_text_fields:
            value = (free_text.get(text_field.name) or "").strip()
            if text_field.required and not value:
                raise ValidationError(text_field.name, f"Enter '{text_field.label}'")
            cleaned[text_field.name] = value
        return cleaned

    def build_submission(
        self,
        free_text: dict[str, str],
        year_params: Optional[list[YearParameter]] = None,
    ) -> ScenarioSubmission:
        """
        Freeze the current session into a submission.

        Raises:
            IncompleteSelection: A category has no card.
            ValidationError: A required free-text field is empty.
        """
        selection = self.finalize()
        cleaned = self._clean_free_text(free_text)

        projection: list[YearResult] = []
        if self.template.has_projection:
            if year_params is not None:
                projection = self.recompute_projection(year_params)
            else:
                projection = self.initialize_projection()

        return ScenarioSubmission(
            template=self.template.name,
            participant=self._state.participant,
            selection=selection,
            free_text=cleaned,
            projection=projection,
            targets=self._state.targets,
        )

    def submit(
        self,
        free_text: dict[str, str],
        year_params: Optional[list[YearParameter]] = None,
        today: Optional[date] = None,
    ) -> EvaluationResult:
        """
        Evaluate the scenario with the AI collaborator.

        Validation happens before any external call. A failed evaluation
        leaves the previous result in place.

        Args:
            free_text: Field name -> team input.
            year_params: Edited projection parameters (business template), as
                YearParameter records or plain dicts.
            today: Evaluation date for the prompt.

        Returns:
            The normalized evaluation result.

        Raises:
            SubmissionInProgress: Another evaluation is outstanding.
            IncompleteSelection, ValidationError: Local input problems.
            AIServiceUnavailable, MalformedAIResponse: The AI step failed.
        """
        if self._submitting:
            raise SubmissionInProgress()

        submission = self.build_submission(free_text, year_params)
        if self.evaluator is None:
            raise ValueError("No evaluator configured")

        self._submitting = True
        try:
            self._log(f"Evaluating {self.template.title} for team '{submission.participant.team_name}'")
            workflow = EvaluationWorkflow(self.template, self.evaluator, log=self._log)
            final_state = workflow.run(submission, today=today)
        except MalformedAIResponse as e:
            self._log(f"Unreadable AI response ({e.raw_length} chars): {e.preview!r}")
            raise
        finally:
            self._submitting = False

        self._state.free_text = dict(submission.free_text)
        self._state.submission = submission
        self._state.result = final_state.result
        self._state.save_receipt = None
        self._log("Evaluation complete")
        return final_state.result

    def save(self, today: Optional[date] = None) -> SaveReceipt:
        """
        Save the latest evaluation to the plan registry.

        A failure never discards the evaluation; saving can be retried
        without evaluating again.

        Raises:
            PersistenceFailed: The registry did not store the plan.
        """
        if self._state.result is None or self._state.submission is None:
            raise ValueError("Nothing to save: submit the scenario first")
        if self.registry is None:
            raise ValueError("No plan registry configured")

        summary = build_summary(self._state.submission, today or date.today())
        try:
            receipt = self.registry.save(summary, self._state.result)
        except PersistenceFailed as e:
            self._log(f"Save failed: {e.detail}")
            raise
        except Exception as e:
            self._log(f"Save failed: {e}")
            raise PersistenceFailed(str(e)) from e

        self._state.save_receipt = receipt
        self._log(f"Saved: {receipt.location_url or receipt.location_id}")
        return receipt

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def snapshot(self) -> SessionState:
        state = self._state.model_copy(deep=True)
        state.selection = self._machine.get_state()
        return state

    def to_json(self) -> str:
        return self.snapshot().model_dump_json()

    @classmethod
    def from_json(
        cls,
        data: str,
        catalog: Optional[CardCatalog] = None,
        evaluator: Optional[Evaluator] = None,
        registry: Optional[PlanRegistry] = None,
        verbose: bool = False,
    ) -> "ScenarioSession":
        state = SessionState.model_validate_json(data)
        return cls(
            state.template,
            catalog=catalog,
            evaluator=evaluator,
            registry=registry,
            state=state,
            verbose=verbose,
        )

    def save_to(self, store: SessionStore, key: str) -> None:
        store.put(key, self.to_json())

    @classmethod
    def load_from(cls, store: SessionStore, key: str, **kwargs) -> Optional["ScenarioSession"]:
        """Resume a stored session, or None if the key is unknown."""
        data = store.get(key)
        if data is None:
            return None
        return cls.from_json(data, **kwargs)
