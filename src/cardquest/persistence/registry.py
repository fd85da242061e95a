"""External plan registry: where evaluated scenarios are saved."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, Field

from ..agents.models import BusinessEvaluation, PolicyEvaluation
from ..config import NOTION_API_URL, NOTION_VERSION, require_env
from ..errors import PersistenceFailed
from ..models.submission import ScenarioSubmission


# Notion rich_text content limit
MAX_TEXT = 2000
SAVED_STATUS = "AI評価完了"


class SaveReceipt(BaseModel):
    """Where the registry stored the plan."""

    location_id: str
    location_url: str = ""


class ScenarioSummary(BaseModel):
    """Flat, registry-friendly description of a submitted scenario."""

    template: str
    team_name: str
    members: str = ""
    title: str = Field(description="Solution name or policy headline")
    cards: dict[str, str] = Field(default_factory=dict, description="Category key -> 'rank - title'")
    free_text: dict[str, str] = Field(default_factory=dict)
    evaluated_on: date

    def page_title(self) -> str:
        return f"{self.team_name} - {self.title} ({self.evaluated_on.strftime('%Y/%m/%d')})"


def headline(text: str, limit: int = 50) -> str:
    """First non-empty line of free text, shortened."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line if len(line) <= limit else line[:limit] + "..."
    return ""


def build_summary(submission: ScenarioSubmission, evaluated_on: date) -> ScenarioSummary:
    """
    Summarize a submission for saving.

    Args:
        submission: The evaluated submission.
        evaluated_on: Date stamped on the saved record, injected by the caller.
    """
    text = submission.free_text
    title = text.get("solution_name") or headline(text.get("plan_text", ""))
    return ScenarioSummary(
        template=submission.template,
        team_name=submission.participant.team_name,
        members=submission.participant.members,
        title=title,
        cards={key: card.label() for key, card in submission.selection.cards.items()},
        free_text=dict(text),
        evaluated_on=evaluated_on,
    )


class PlanRegistry(ABC):
    """Fire-and-forget store for evaluated plans."""

    @abstractmethod
    def save(
        self,
        summary: ScenarioSummary,
        result: Union[BusinessEvaluation, PolicyEvaluation],
    ) -> SaveReceipt:
        """
        Persist a plan and its evaluation.

        Raises:
            PersistenceFailed: The registry rejected or never received the plan.
        """


class InMemoryPlanRegistry(PlanRegistry):
    """Registry kept in process memory, for local runs and tests."""

    def __init__(self):
        self.records: list[tuple[ScenarioSummary, BaseModel]] = []

    def save(self, summary, result) -> SaveReceipt:
        self.records.append((summary, result))
        location_id = f"plan-{len(self.records)}"
        return SaveReceipt(location_id=location_id, location_url=f"memory://plans/{location_id}")


def _text(value: str) -> dict[str, Any]:
    return {"rich_text": [{"text": {"content": (value or "")[:MAX_TEXT]}}]}


def _number(value: float) -> dict[str, Any]:
    return {"number": value}


def business_page_properties(summary: ScenarioSummary, result: BusinessEvaluation) -> dict[str, Any]:
    """Notion properties of the business plan database."""
    metrics = result.metrics
    text = summary.free_text
    return {
        "企画書タイトル": {"title": [{"text": {"content": summary.page_title()}}]},
        "チーム名": _text(summary.team_name),
        "メンバー名": _text(summary.members),
        "ソリューション名": _text(text.get("solution_name", "")),
        "選択カード_ハート": _text(summary.cards.get("persona", "")),
        "選択カード_ダイヤ": _text(summary.cards.get("problem", "")),
        "選択カード_クラブ": _text(summary.cards.get("partner", "")),
        "選択カード_スペード": _text(summary.cards.get("job_type", "")),
        "月間販売見込数": _number(metrics.monthly_sales),
        "販売単価": _number(metrics.unit_price),
        "変動費月額": _number(metrics.variable_cost_per_unit),
        "実現可能性スコア": _number(metrics.feasibility_score),
        "月間売上試算": _number(metrics.monthly_revenue),
        "月間利益試算": _number(metrics.monthly_profit),
        "他社優位性": _text(text.get("advantage", "")),
        "マーケティング戦略": _text(text.get("user_benefit", "")),
        "コスト低減策": _text(text.get("plan_revision", "")),
        "AIが生成したビジネスプラン": _text(result.improved_plan),
        "AI評価スコア": _number(result.score),
        "AI評価コメント": _text(result.mentor_comment),
        "強み": _text("\n".join(result.strengths)),
        "課題・リスク": _text("\n".join(result.issues)),
        "ステータス": {"select": {"name": SAVED_STATUS}},
    }


def policy_page_properties(summary: ScenarioSummary, result: PolicyEvaluation) -> dict[str, Any]:
    """Notion properties of the policy proposal database."""
    return {
        "提案書タイトル": {"title": [{"text": {"content": summary.page_title()}}]},
        "チーム名": _text(summary.team_name),
        "メンバー名": _text(summary.members),
        "選択カード_ペルソナ": _text(summary.cards.get("persona", "")),
        "選択カード_課題": _text(summary.cards.get("problem", "")),
        "選択カード_パートナー": _text(summary.cards.get("partner", "")),
        "選択カード_アクション": _text(summary.cards.get("action", "")),
        "政策提案": _text(summary.free_text.get("plan_text", "")),
        "AI整理提案書": _text(result.proposal),
        "Well-Being指数": _number(result.well_being_scores.total),
        "10年後人口（施策あり）": _number(result.population_sim.with_policy.y10),
        "総合ランク": {"select": {"name": result.rank or "-"}},
        "AI評価コメント": _text(result.comment),
        "強み": _text("\n".join(result.strengths)),
        "課題": _text("\n".join(result.challenges)),
        "ステータス": {"select": {"name": SAVED_STATUS}},
    }


class NotionPlanRegistry(PlanRegistry):
    """
    Saves each plan as a page in a Notion database.

    Long texts are cut to Notion's 2000-character rich_text limit.
    """

    def __init__(
        self,
        database_id: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.database_id = require_env("NOTION_PLAN_DB_ID", database_id)
        self.api_key = require_env("NOTION_API_KEY", api_key)
        self._client = client or httpx.Client(timeout=timeout)

    def page_properties(self, summary: ScenarioSummary, result: BaseModel) -> dict[str, Any]:
        if isinstance(result, BusinessEvaluation):
            return business_page_properties(summary, result)
        if isinstance(result, PolicyEvaluation):
            return policy_page_properties(summary, result)
        raise TypeError(f"Unsupported result type: {type(result).__name__}")

    def save(self, summary, result) -> SaveReceipt:
        page = {
            "parent": {"database_id": self.database_id},
            "properties": self.page_properties(summary, result),
        }
        try:
            response = self._client.post(
                f"{NOTION_API_URL}/pages",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Notion-Version": NOTION_VERSION,
                    "Content-Type": "application/json",
                },
                json=page,
            )
        except httpx.HTTPError as exc:
            raise PersistenceFailed(str(exc)) from exc

        if response.status_code != 200:
            raise PersistenceFailed(f"Notion returned {response.status_code}: {response.text[:200]}")

        data = response.json()
        return SaveReceipt(location_id=data.get("id", ""), location_url=data.get("url", ""))
