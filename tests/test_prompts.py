"""Unit tests for deterministic prompt rendering."""

from datetime import date

import pytest

from cardquest.models import Participant, PolicyTargets, ScenarioSubmission
from cardquest.projection import compute_projection, initialize_years
from cardquest.prompts import business, render_business_prompt, render_policy_prompt
from cardquest.prompts.formatting import fmt_number, fmt_yen
from cardquest.templates import BUSINESS_TEMPLATE, POLICY_TEMPLATE, build_business_metrics, build_policy_metrics


@pytest.fixture
def business_submission(business_selection, business_free_text):
    return ScenarioSubmission(
        template="business",
        participant=Participant(team_name="Team Alpha"),
        selection=business_selection,
        free_text=business_free_text,
        projection=compute_projection(initialize_years(100, 5000, 1000)),
    )


@pytest.fixture
def policy_submission(policy_selection):
    return ScenarioSubmission(
        template="policy",
        participant=Participant(team_name="Team Beta"),
        selection=policy_selection,
        free_text={"plan_text": "Shared rides\nfor elderly residents"},
        targets=PolicyTargets(target_population=15000, target_well_being=80),
    )


class TestFormatting:

    def test_numbers(self):
        assert fmt_number(1234567) == "1,234,567"
        assert fmt_number(7.0) == "7"
        assert fmt_number(6.75) == "6.75"

    def test_yen(self):
        assert fmt_yen(500000) == "¥500,000"
        assert fmt_yen(-1200) == "-¥1,200"


class TestBusinessPrompt:

    def test_deterministic(self, business_submission):
        metrics = build_business_metrics(business_submission.selection, business_submission.projection)
        first = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE, date(2025, 4, 1))
        second = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE, date(2025, 4, 1))

        assert first == second

    def test_contains_cards_and_metrics(self, business_submission):
        metrics = build_business_metrics(business_submission.selection, business_submission.projection)
        prompt = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE)

        assert "Team: Team Alpha" in prompt
        assert "- Card: A - Busy parents" in prompt
        assert "- Monthly revenue: ¥500,000" in prompt
        assert "(¥1,000 per unit x 100 units)" in prompt
        assert "- Profit margin: 80%" in prompt
        assert "| Total |" in prompt

    def test_projection_table_rows(self, business_submission):
        metrics = build_business_metrics(business_submission.selection, business_submission.projection)
        prompt = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE)

        assert "| 1 | 100 | ¥5,000 | ¥1,000 | ¥6,000,000 | ¥1,200,000 | ¥4,800,000 | 80% |" in prompt
        assert "| 2 | 120 |" in prompt

    def test_free_text_verbatim(self, business_submission):
        metrics = build_business_metrics(business_submission.selection, business_submission.projection)
        prompt = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE)

        for value in business_submission.free_text.values():
            assert value in prompt
        assert business.RESULT_SCHEMA in prompt

    def test_date_only_when_given(self, business_submission):
        metrics = build_business_metrics(business_submission.selection, business_submission.projection)

        with_date = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE, date(2025, 4, 1))
        without_date = render_business_prompt(business_submission, metrics, BUSINESS_TEMPLATE)

        assert "Evaluation date: 2025-04-01" in with_date
        assert "Evaluation date" not in without_date


class TestPolicyPrompt:

    def test_contains_cards_totals_and_goals(self, policy_submission):
        metrics = build_policy_metrics(policy_submission.selection)
        prompt = render_policy_prompt(policy_submission, metrics, POLICY_TEMPLATE, date(2025, 4, 1))

        assert "Team name: Team Beta" in prompt
        assert "- Total annual budget: 38 million yen" in prompt
        assert "- Residents affected: 4,500" in prompt
        assert "- Target population: 15,000 (starting from 10,000)" in prompt
        assert "- Target well-being index: 80 (out of 100)" in prompt
        assert "Shared rides\nfor elderly residents" in prompt
        assert "Evaluation date: 2025-04-01" in prompt

    def test_template_synthesizes_same_prompt(self, policy_submission):
        metrics = build_policy_metrics(policy_submission.selection)

        direct = render_policy_prompt(policy_submission, metrics, POLICY_TEMPLATE)
        via_template = POLICY_TEMPLATE.synthesize_prompt(policy_submission, metrics)

        assert direct == via_template
