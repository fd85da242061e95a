"""Unit tests for plan registries and session stores."""

import json
from datetime import date

import httpx
import pytest

from cardquest.agents import BusinessEvaluation, PolicyEvaluation
from cardquest.errors import PersistenceFailed
from cardquest.models import Participant, ScenarioSubmission
from cardquest.persistence import (
    InMemoryPlanRegistry,
    InMemorySessionStore,
    JsonFileSessionStore,
    NotionPlanRegistry,
    build_summary,
)
from cardquest.persistence.registry import MAX_TEXT, headline
from cardquest.templates import build_business_metrics


@pytest.fixture
def business_submission(business_selection, business_free_text):
    return ScenarioSubmission(
        template="business",
        participant=Participant(team_name="Team Alpha", members="Aki\nBen"),
        selection=business_selection,
        free_text=business_free_text,
    )


@pytest.fixture
def business_result(business_selection):
    return BusinessEvaluation(
        improved_plan="x" * 5000,
        score=81,
        strengths=["One", "Two"],
        metrics=build_business_metrics(business_selection),
    )


def notion_registry(handler):
    return NotionPlanRegistry(
        database_id="plans",
        api_key="secret",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestSummary:

    def test_business_summary(self, business_submission):
        summary = build_summary(business_submission, date(2025, 4, 1))

        assert summary.title == "Farm Box"
        assert summary.cards["persona"] == "A - Busy parents"
        assert summary.page_title() == "Team Alpha - Farm Box (2025/04/01)"

    def test_policy_title_from_first_line(self, policy_selection):
        submission = ScenarioSubmission(
            template="policy",
            participant=Participant(team_name="Team Beta"),
            selection=policy_selection,
            free_text={"plan_text": "\n  Shared rides  \nDetails follow"},
        )
        assert build_summary(submission, date(2025, 4, 1)).title == "Shared rides"

    def test_headline_shortened(self):
        assert headline("a" * 60, limit=50) == "a" * 50 + "..."
        assert headline("") == ""


class TestInMemoryRegistry:

    def test_save_returns_receipt(self, business_submission, business_result):
        registry = InMemoryPlanRegistry()
        receipt = registry.save(build_summary(business_submission, date(2025, 4, 1)), business_result)

        assert receipt.location_id == "plan-1"
        assert receipt.location_url == "memory://plans/plan-1"
        assert len(registry.records) == 1


class TestNotionRegistry:

    def test_business_page(self, business_submission, business_result):
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "page-1", "url": "https://notion.so/page-1"})

        summary = build_summary(business_submission, date(2025, 4, 1))
        receipt = notion_registry(handler).save(summary, business_result)

        assert receipt.location_id == "page-1"
        assert receipt.location_url == "https://notion.so/page-1"

        page = requests[0]
        props = page["properties"]
        assert page["parent"] == {"database_id": "plans"}
        assert props["企画書タイトル"]["title"][0]["text"]["content"] == "Team Alpha - Farm Box (2025/04/01)"
        assert props["AI評価スコア"] == {"number": 81}
        assert props["月間売上試算"] == {"number": 500000}
        assert props["強み"]["rich_text"][0]["text"]["content"] == "One\nTwo"
        assert props["ステータス"] == {"select": {"name": "AI評価完了"}}

    def test_long_text_truncated(self, business_submission, business_result):
        pages = []

        def handler(request):
            pages.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "page-1"})

        notion_registry(handler).save(build_summary(business_submission, date(2025, 4, 1)), business_result)

        content = pages[0]["properties"]["AIが生成したビジネスプラン"]["rich_text"][0]["text"]["content"]
        assert len(content) == MAX_TEXT

    def test_policy_page(self, policy_selection):
        pages = []

        def handler(request):
            pages.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "page-2"})

        submission = ScenarioSubmission(
            template="policy",
            participant=Participant(team_name="Team Beta"),
            selection=policy_selection,
            free_text={"plan_text": "Shared rides"},
        )
        result = PolicyEvaluation(rank="S", proposal="Ride sharing")

        notion_registry(handler).save(build_summary(submission, date(2025, 4, 1)), result)

        props = pages[0]["properties"]
        assert props["総合ランク"] == {"select": {"name": "S"}}
        assert props["政策提案"]["rich_text"][0]["text"]["content"] == "Shared rides"

    def test_rejected_save(self, business_submission, business_result):
        registry = notion_registry(lambda request: httpx.Response(400, text="validation_error"))

        with pytest.raises(PersistenceFailed) as exc:
            registry.save(build_summary(business_submission, date(2025, 4, 1)), business_result)
        assert "400" in exc.value.detail
        assert exc.value.retryable

    def test_network_failure(self, business_submission, business_result):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(PersistenceFailed):
            notion_registry(handler).save(build_summary(business_submission, date(2025, 4, 1)), business_result)

    def test_missing_database_id(self, monkeypatch):
        monkeypatch.delenv("NOTION_PLAN_DB_ID", raising=False)
        with pytest.raises(ValueError):
            NotionPlanRegistry(api_key="secret")


class TestSessionStores:

    def test_in_memory(self):
        store = InMemorySessionStore()
        store.put("team", "{}")

        assert store.get("team") == "{}"
        store.delete("team")
        assert store.get("team") is None
        store.delete("team")

    def test_json_files(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "sessions")
        store.put("Team Alpha/1", '{"a": 1}')

        assert store.get("Team Alpha/1") == '{"a": 1}'
        assert (tmp_path / "sessions" / "Team_Alpha_1.json").exists()
        store.delete("Team Alpha/1")
        assert store.get("Team Alpha/1") is None
