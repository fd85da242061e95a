"""Runner script for evaluating a card scenario from the command line."""

import json
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from ..agents.evaluator import ScenarioEvaluator
from ..agents.models import BusinessEvaluation, PolicyEvaluation
from ..config import load_environment, require_env
from ..errors import ScenarioError
from ..models.submission import Participant, PolicyTargets
from ..persistence.registry import InMemoryPlanRegistry, NotionPlanRegistry, PlanRegistry
from ..persistence.session_store import JsonFileSessionStore
from ..prompts.formatting import fmt_number, fmt_yen
from ..selection.catalog import CardCatalog, NotionCardCatalog, StaticCardCatalog
from ..templates import ScenarioTemplate, get_template
from .session import ScenarioSession


class CardQuestRunner:
    """
    High-level runner for one scenario evaluation.

    Provides:
    - Collaborator wiring from the environment (catalog, AI, registry)
    - Progress tracking and logging
    - Result formatting
    """

    def __init__(
        self,
        template: str = "business",
        catalog_path: Optional[Path] = None,
        env_path: Optional[Path] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        use_notion_registry: bool = False,
        evaluator: Any = None,
        verbose: bool = True,
    ):
        """
        Initialize the runner.

        Args:
            template: Template name (business or policy).
            catalog_path: Static card JSON; the Notion catalog is used when omitted.
            env_path: Path to environment file with API keys.
            provider: LLM provider overriding the template default.
            model: Model identifier overriding the template default.
            use_notion_registry: Save plans to Notion instead of memory.
            evaluator: Prebuilt evaluator; skips provider setup.
            verbose: Whether to print progress updates.
        """
        self.verbose = verbose
        self.template: ScenarioTemplate = get_template(template)
        load_environment(env_path)

        self.catalog = self._create_catalog(catalog_path)
        self.evaluator = evaluator or ScenarioEvaluator(
            provider=provider or self.template.default_provider,
            model=model or (None if provider else self.template.default_model),
            env_path=env_path,
            json_mode=self.template.json_mode,
            max_tokens=self.template.max_tokens,
        )
        self.registry: PlanRegistry = (
            NotionPlanRegistry() if use_notion_registry else InMemoryPlanRegistry()
        )

    def _log(self, message: str):
        """Print message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def _create_catalog(self, catalog_path: Optional[Path]) -> CardCatalog:
        if catalog_path:
            self._log(f"Loading cards from: {catalog_path}")
            return StaticCardCatalog.from_json(catalog_path)
        return NotionCardCatalog(
            database_id=require_env(self.template.catalog_db_env),
            attribute_properties=self.template.notion_properties(),
        )

    def create_session(self, scenario: dict[str, Any]) -> ScenarioSession:
        """Start a session for the participant described in a scenario."""
        targets = scenario.get("targets")
        return ScenarioSession(
            self.template,
            participant=Participant.model_validate(scenario.get("participant", {})),
            targets=PolicyTargets.model_validate(targets) if targets else None,
            catalog=self.catalog,
            evaluator=self.evaluator,
            registry=self.registry,
            verbose=self.verbose,
        )

    def run(
        self,
        scenario: dict[str, Any],
        save: bool = False,
        today: Optional[date] = None,
        session: Optional[ScenarioSession] = None,
    ) -> ScenarioSession:
        """
        Play a scenario end to end.

        Args:
            scenario: Parsed scenario file (participant, cards, free_text, ...).
            save: Whether to save the evaluation to the plan registry.
            today: Evaluation date; defaults to the current date.
            session: Resumed session to continue instead of a new one.

        Returns:
            The session holding the evaluation result.
        """
        today = today or date.today()
        session = session or self.create_session(scenario)

        self._log(f"Starting {self.template.title} evaluation")
        session.load_catalog()

        cards = scenario.get("cards", {})
        for category in self.template.category_keys():
            if category in cards:
                session.select_card(category, cards[category])
        selection = session.finalize()
        for category in selection.categories():
            self._log(f"  {category}: {selection[category].label()}")

        year_params = None
        if self.template.has_projection:
            if scenario.get("year_params"):
                year_params = scenario["year_params"]
            else:
                session.initialize_projection(scenario.get("growth_rate"))

        try:
            session.submit(scenario.get("free_text", {}), year_params=year_params, today=today)
        except ScenarioError as e:
            self._log(f"Pipeline error: {e}")
            raise

        self._log(f"Pipeline complete!")
        if save:
            receipt = session.save(today)
            self._log(f"  Saved: {receipt.location_url or receipt.location_id}")
        return session

    def get_summary(self, session: ScenarioSession) -> str:
        """Get formatted summary of an evaluated session."""
        result = session.result
        if isinstance(result, BusinessEvaluation):
            return format_business_report(result)
        if isinstance(result, PolicyEvaluation):
            return format_policy_report(result)
        return "No evaluation yet."


def _bullets(items: list[str]) -> list[str]:
    return [f"- {item}" for item in items] or ["- (none)"]


def format_business_report(result: BusinessEvaluation) -> str:
    m = result.metrics
    lines = [
        "BUSINESS PLAN EVALUATION",
        "=" * 50,
        f"Score: {fmt_number(result.score)}/100",
        "",
        f"Monthly revenue: {fmt_yen(m.monthly_revenue)}",
        f"Monthly profit: {fmt_yen(m.monthly_profit)} ({m.profit_margin}%)",
        f"5-year profit: {fmt_yen(m.five_year_total.annual_profit)}",
        "",
        "Improved plan:",
        result.improved_plan,
        "",
        "Strengths:",
        *_bullets(result.strengths),
        "",
        "Issues:",
        *_bullets(result.issues),
        "",
        "Next actions:",
        *_bullets(result.next_actions),
        "",
        f"Mentor: {result.mentor_comment}",
    ]
    return "\n".join(lines)


def format_policy_report(result: PolicyEvaluation) -> str:
    sim = result.population_sim
    judge = result.rank_judge
    lines = [
        "WELL-BEING POLICY EVALUATION",
        "=" * 50,
        f"Rank: {result.rank or '-'}",
        f"Well-being index: {result.well_being_scores.total}",
        f"Population in 10 years: {fmt_number(sim.with_policy.y10)} "
        f"(without policy {fmt_number(sim.without_policy.y10)})",
        f"Population goal met: {'yes' if judge.population_achieved else 'no'}",
        f"Well-being goal met: {'yes' if judge.well_being_achieved else 'no'}",
        "",
        "Proposal:",
        result.proposal,
        "",
        "Strengths:",
        *_bullets(result.strengths),
        "",
        "Challenges:",
        *_bullets(result.challenges),
        "",
        "Next actions:",
        *_bullets(result.next_actions),
        "",
        f"Comment: {result.comment}",
    ]
    return "\n".join(lines)


def main():
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Evaluate a card game scenario with AI"
    )
    parser.add_argument(
        "scenario",
        type=Path,
        help="Scenario JSON file (participant, cards, free_text, ...)",
    )
    parser.add_argument(
        "-t", "--template",
        choices=["business", "policy"],
        help="Scenario template (defaults to the scenario file's 'template')",
    )
    parser.add_argument(
        "-c", "--catalog",
        type=Path,
        help="Static card catalog JSON (default: Notion card database)",
    )
    parser.add_argument(
        "-p", "--provider",
        choices=["openai", "anthropic", "groq", "google"],
        help="LLM provider (default: the template's)",
    )
    parser.add_argument(
        "-m", "--model",
        type=str,
        help="Model identifier",
    )
    parser.add_argument(
        "-e", "--env",
        type=Path,
        default=Path("keyholder.env"),
        help="Path to environment file",
    )
    parser.add_argument(
        "-s", "--save",
        action="store_true",
        help="Save the evaluation to the Notion plan database",
    )
    parser.add_argument(
        "--session-dir",
        type=Path,
        help="Directory where the session is stored as JSON",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args()

    scenario = json.loads(args.scenario.read_text(encoding="utf-8"))
    template = args.template or scenario.get("template", "business")

    try:
        runner = CardQuestRunner(
            template=template,
            catalog_path=args.catalog,
            env_path=args.env,
            provider=args.provider,
            model=args.model,
            use_notion_registry=args.save,
            verbose=not args.quiet,
        )

        store = JsonFileSessionStore(args.session_dir) if args.session_dir else None
        key = scenario.get("participant", {}).get("team_name", "session")
        session = None
        if store:
            session = ScenarioSession.load_from(
                store, key,
                catalog=runner.catalog,
                evaluator=runner.evaluator,
                registry=runner.registry,
                verbose=runner.verbose,
            )
        session = session or runner.create_session(scenario)

        try:
            runner.run(scenario, save=args.save, session=session)
        finally:
            if store:
                session.save_to(store, key)
    except ScenarioError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Print summary
    print("\n" + "=" * 50)
    print(runner.get_summary(session))


if __name__ == "__main__":
    main()
