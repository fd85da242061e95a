"""Shared test fixtures for the card scenario pipeline."""
import json

import pytest

from cardquest.models import Card, Participant, SelectionSet
from cardquest.selection import StaticCardCatalog


def make_card(card_id, suit, rank="A", title="", **attributes):
    return Card(
        id=card_id,
        suit=suit,
        rank=rank,
        title=title or f"Card {card_id}",
        description=f"Description of {card_id}",
        attributes=attributes,
    )


class FakeEvaluator:
    """Stands in for the AI: records prompts and replays canned answers."""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def run(self, prompt, system_prompt=None):
        self.calls.append((prompt, system_prompt))
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


# =============================================================================
# BUSINESS TEMPLATE
# =============================================================================

@pytest.fixture
def business_cards():
    """One card per business category, plus a spare persona."""
    return {
        "persona": make_card("h1", "♥️ハート", "A", "Busy parents", market_size=50, monthly_sales=100),
        "problem": make_card("d1", "♦️ダイヤ", "3", "No time to cook", unit_price=5000),
        "partner": make_card("c1", "♣️クラブ", "K", "Local farms", variable_cost=1000),
        "job_type": make_card("s1", "♠️スペード", "7", "Subscription", feasibility_score=7),
        "spare_persona": make_card("h2", "♥️ハート", "2", "Students", market_size=80, monthly_sales=40),
    }


@pytest.fixture
def business_selection(business_cards):
    return SelectionSet(cards={
        key: business_cards[key] for key in ("persona", "problem", "partner", "job_type")
    })


@pytest.fixture
def business_catalog(business_cards):
    return StaticCardCatalog(list(business_cards.values()))


@pytest.fixture
def business_free_text():
    return {
        "solution_name": "Farm Box",
        "user_benefit": "Fresh dinners in ten minutes",
        "advantage": "Direct contracts with nearby farms",
        "plan_revision": "Start with one school district",
    }


@pytest.fixture
def business_response():
    """AI answer wrapped in a fence, with numbers that disagree with local ones."""
    body = {
        "improvedPlan": "Farm Box delivers weekly kits.",
        "executiveSummary": "Local meal kits.",
        "score": 72,
        "scoreBreakdown": {"marketPotential": 20, "feasibility": 18, "differentiation": 16, "planQuality": 18},
        "strengths": ["Clear customer"],
        "issues": ["Delivery cost"],
        "nextActions": ["Interview parents"],
        "mentorComment": "Good start.",
        "metrics": {"monthly_revenue": 1},
    }
    return "Here is my evaluation:\n```json\n" + json.dumps(body) + "\n```\nThanks!"


# =============================================================================
# POLICY TEMPLATE
# =============================================================================

def policy_card(card_id, suit, rank, well_being, feasibility, residents, months, budget):
    return make_card(
        card_id, suit, rank,
        well_being_score=well_being,
        feasibility_score=feasibility,
        affected_residents=residents,
        implementation_months=months,
        budget_million_yen=budget,
    )


@pytest.fixture
def policy_cards():
    return {
        "persona": policy_card("p1", "♠️スペード", "A", 8, 6, 1200, 12, 5),
        "problem": policy_card("p2", "♣️クラブ", "4", 6, 7, 800, 6, 3),
        "partner": policy_card("p3", "♦️ダイヤ", "J", 7, 9, 500, 24, 10),
        "action": policy_card("p4", "♥️ハート", "Q", 9, 5, 2000, 18, 20),
    }


@pytest.fixture
def policy_selection(policy_cards):
    return SelectionSet(cards=dict(policy_cards))


@pytest.fixture
def policy_catalog(policy_cards):
    return StaticCardCatalog(list(policy_cards.values()))


@pytest.fixture
def policy_response():
    """Policy answer whose total and target judgement are both wrong."""
    return json.dumps({
        "proposal": "Shared rides for elderly residents.",
        "wellBeingScores": {
            "economic": 10, "socialConnection": 11, "healthMedical": 9.5, "autonomy": 8,
            "generosity": 7, "trust": 9, "safety": 10, "nature": 6, "total": 99,
        },
        "populationSim": {
            "withoutPolicy": {"y5": 9500, "y10": 9000, "y20": 8000},
            "withPolicy": {"y5": 10500, "y10": 12500, "y20": 13000},
        },
        "rankJudge": {"populationAchieved": False, "wellBeingAchieved": True},
        "rank": "A",
        "strengths": ["Uses existing cars"],
        "challenges": ["Driver shortage"],
        "nextActions": ["Pilot in one district"],
        "comment": "Promising.",
    })


# =============================================================================
# COMMON
# =============================================================================

@pytest.fixture
def participant():
    return Participant(team_name="Team Alpha", members="Aki\nBen")


@pytest.fixture
def fake_evaluator():
    """Factory for FakeEvaluator instances."""
    return FakeEvaluator
