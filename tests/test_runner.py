"""Tests for the command-line runner and template descriptors."""

import json
from datetime import date

import pytest

from cardquest.errors import IncompleteSelection, ValidationError
from cardquest.pipeline import CardQuestRunner
from cardquest.templates import BUSINESS_TEMPLATE, POLICY_TEMPLATE, get_template


@pytest.fixture
def catalog_file(tmp_path, business_cards):
    path = tmp_path / "cards.json"
    path.write_text(
        json.dumps([card.model_dump() for card in business_cards.values()], ensure_ascii=False),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def scenario(business_free_text):
    return {
        "template": "business",
        "participant": {"team_name": "Team Alpha", "members": "Aki"},
        "cards": {"persona": "h1", "problem": "d1", "partner": "c1", "job_type": "s1"},
        "free_text": business_free_text,
        "growth_rate": 0.1,
    }


class TestTemplates:

    def test_lookup(self):
        assert get_template("business") is BUSINESS_TEMPLATE
        assert get_template("policy") is POLICY_TEMPLATE
        with pytest.raises(ValueError):
            get_template("quiz")

    def test_suits_in_display_order(self):
        assert list(POLICY_TEMPLATE.suits().values()) == ["♠️スペード", "♣️クラブ", "♦️ダイヤ", "♥️ハート"]

    def test_notion_properties(self):
        props = BUSINESS_TEMPLATE.notion_properties()
        assert props["unit_price"] == "販売単価（円）"


class TestRunner:

    def test_business_run(self, catalog_file, scenario, fake_evaluator, business_response):
        runner = CardQuestRunner(
            catalog_path=catalog_file,
            evaluator=fake_evaluator([business_response]),
            verbose=False,
        )

        session = runner.run(scenario, save=True, today=date(2025, 4, 1))

        assert [p.monthly_sales for p in session.year_params] == [100, 110, 121, 133, 146]
        assert session.save_receipt.location_id == "plan-1"
        report = runner.get_summary(session)
        assert "Score: 72" in report
        assert "Monthly revenue: ¥500,000" in report

    def test_missing_card(self, catalog_file, scenario, fake_evaluator, business_response):
        del scenario["cards"]["partner"]
        runner = CardQuestRunner(
            catalog_path=catalog_file,
            evaluator=fake_evaluator([business_response]),
            verbose=False,
        )

        with pytest.raises(IncompleteSelection) as exc:
            runner.run(scenario)
        assert exc.value.missing == ["partner"]

    def test_out_of_range_year_params(self, catalog_file, scenario, fake_evaluator, business_response):
        scenario["year_params"] = [
            {"year": 7, "monthly_sales": 10, "unit_price": 1000, "variable_cost_per_unit": 100},
        ]
        evaluator = fake_evaluator([business_response])
        runner = CardQuestRunner(catalog_path=catalog_file, evaluator=evaluator, verbose=False)

        with pytest.raises(ValidationError) as exc:
            runner.run(scenario)
        assert exc.value.field == "year_params"
        assert evaluator.calls == []

    def test_summary_before_evaluation(self, catalog_file, scenario, fake_evaluator):
        runner = CardQuestRunner(catalog_path=catalog_file, evaluator=fake_evaluator(["{}"]), verbose=False)
        assert runner.get_summary(runner.create_session(scenario)) == "No evaluation yet."
