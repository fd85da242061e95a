"""Pydantic models for evaluation results returned by the AI evaluator."""

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, AliasChoices

from ..models.projection import BusinessMetrics, PolicyMetrics, YearResult


def _as_list(value):
    # A lone string where a list belongs becomes a one-item list
    if isinstance(value, str):
        return [value]
    return value


TextList = Annotated[list[str], BeforeValidator(_as_list)]


class ScoreBreakdown(BaseModel):
    """Four business scoring axes, 0-25 each."""

    model_config = ConfigDict(frozen=True)

    market_potential: float = Field(
        default=0,
        validation_alias=AliasChoices("market_potential", "marketPotential"),
    )
    feasibility: float = 0
    differentiation: float = 0
    plan_quality: float = Field(
        default=0,
        validation_alias=AliasChoices("plan_quality", "planQuality"),
    )


class BusinessEvaluation(BaseModel):
    """Normalized evaluation of a business plan."""

    model_config = ConfigDict(frozen=True)

    template: Literal["business"] = "business"
    improved_plan: str = Field(
        default="",
        description="Improved plan text, about 400 characters",
        validation_alias=AliasChoices("improved_plan", "improvedPlan"),
    )
    executive_summary: str = Field(
        default="",
        description="Investor-facing summary, at most 200 characters",
        validation_alias=AliasChoices("executive_summary", "executiveSummary"),
    )
    target_customer: str = Field(
        default="",
        validation_alias=AliasChoices("target_customer", "targetCustomer"),
    )
    value_proposition: str = Field(
        default="",
        validation_alias=AliasChoices("value_proposition", "valueProposition"),
    )
    revenue_model: str = Field(
        default="",
        validation_alias=AliasChoices("revenue_model", "revenueModel"),
    )
    score: float = Field(default=0, description="Overall score 0-100")
    score_breakdown: ScoreBreakdown = Field(
        default_factory=ScoreBreakdown,
        validation_alias=AliasChoices("score_breakdown", "scoreBreakdown"),
    )
    strengths: TextList = Field(default_factory=list)
    issues: TextList = Field(default_factory=list, description="Issues and risks")
    next_actions: TextList = Field(
        default_factory=list,
        validation_alias=AliasChoices("next_actions", "nextActions"),
    )
    mentor_comment: str = Field(
        default="",
        validation_alias=AliasChoices("mentor_comment", "mentorComment"),
    )

    # Computed locally; never taken from the AI
    metrics: BusinessMetrics = Field(default_factory=BusinessMetrics)
    projection: list[YearResult] = Field(default_factory=list)


class WellBeingScores(BaseModel):
    """Eight well-being axes (0-12.5 each) and their total out of 100."""

    model_config = ConfigDict(frozen=True)

    economic: float = 0
    social_connection: float = Field(
        default=0,
        validation_alias=AliasChoices("social_connection", "socialConnection"),
    )
    health_medical: float = Field(
        default=0,
        validation_alias=AliasChoices("health_medical", "healthMedical"),
    )
    autonomy: float = 0
    generosity: float = 0
    trust: float = 0
    safety: float = 0
    nature: float = 0
    total: float = 0

    AXES: ClassVar[tuple[str, ...]] = (
        "economic",
        "social_connection",
        "health_medical",
        "autonomy",
        "generosity",
        "trust",
        "safety",
        "nature",
    )

    def axis_total(self) -> float:
        return round(sum(getattr(self, axis) for axis in self.AXES), 1)


class PopulationForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    y5: float = 0
    y10: float = 0
    y20: float = 0


class PopulationSim(BaseModel):
    """Population after 5, 10 and 20 years with and without the policy."""

    model_config = ConfigDict(frozen=True)

    without_policy: PopulationForecast = Field(
        default_factory=PopulationForecast,
        validation_alias=AliasChoices("without_policy", "withoutPolicy"),
    )
    with_policy: PopulationForecast = Field(
        default_factory=PopulationForecast,
        validation_alias=AliasChoices("with_policy", "withPolicy"),
    )


class RankJudge(BaseModel):
    """Whether the team's population and well-being targets are met."""

    model_config = ConfigDict(frozen=True)

    population_achieved: bool = Field(
        default=False,
        validation_alias=AliasChoices("population_achieved", "populationAchieved"),
    )
    well_being_achieved: bool = Field(
        default=False,
        validation_alias=AliasChoices("well_being_achieved", "wellBeingAchieved"),
    )
    population_diff: float = Field(
        default=0,
        validation_alias=AliasChoices("population_diff", "populationDiff"),
    )
    well_being_diff: float = Field(
        default=0,
        validation_alias=AliasChoices("well_being_diff", "wellBeingDiff"),
    )


class PolicyEvaluation(BaseModel):
    """Normalized evaluation of a municipal policy proposal."""

    model_config = ConfigDict(frozen=True)

    template: Literal["policy"] = "policy"
    proposal: str = Field(default="", description="Policy proposal, about 400 characters")
    well_being_scores: WellBeingScores = Field(
        default_factory=WellBeingScores,
        validation_alias=AliasChoices("well_being_scores", "wellBeingScores"),
    )
    population_sim: PopulationSim = Field(
        default_factory=PopulationSim,
        validation_alias=AliasChoices("population_sim", "populationSim"),
    )
    rank_judge: RankJudge = Field(
        default_factory=RankJudge,
        validation_alias=AliasChoices("rank_judge", "rankJudge"),
    )
    rank: str = Field(default="", description="Overall rank S, A, B, C or D")
    strengths: TextList = Field(default_factory=list)
    challenges: TextList = Field(default_factory=list)
    next_actions: TextList = Field(
        default_factory=list,
        validation_alias=AliasChoices("next_actions", "nextActions"),
    )
    comment: str = Field(default="", description="Overall comment, about 200 characters")

    # Computed locally; never taken from the AI
    metrics: PolicyMetrics = Field(default_factory=PolicyMetrics)


EvaluationResult = Annotated[
    Union[BusinessEvaluation, PolicyEvaluation],
    Field(discriminator="template"),
]
