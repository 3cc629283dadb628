"""
Risk Analysis Engine
Derives a composite 0–100 risk score, trends, ranked recommendations, a
predicted maintenance date, a cost estimate and a confidence score for a
property from its completed inspection history.

Composite risk score (most recent inspection + property attributes):
  - Age           : min(100, age_years / 40 × 100)           × 0.25
  - Condition     : (100 − condition_score)                   × 0.30
  - Weather damage: 30 if latest inspection weather-damaged    × 0.20
  - Maintenance   : min(100, days_since_maintenance / 730 × 100) × 0.15
  - Warranty      : 25 if warranty expired                     × 0.10

Risk level: critical ≥ 80, high ≥ 60, medium ≥ 35, else low.
"""
import asyncio
import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Sequence

from portfolio_engine.core.config import Settings, get_settings
from portfolio_engine.schemas.property import InspectionRecord, Property
from portfolio_engine.schemas.risk import (
    PRIORITY_RANK,
    Priority,
    Recommendation,
    RecommendationType,
    RiskAnalysis,
    RiskLevel,
    TrendAnalysis,
    TrendDirection,
)
from portfolio_engine.services.condition_keywords import mentions_weather_damage, score_condition
from portfolio_engine.services.inspection_store import InspectionStore

logger = logging.getLogger(__name__)


RISK_WEIGHTS = {
    "age": 0.25,
    "condition": 0.30,
    "weather_damage": 0.20,
    "maintenance": 0.15,
    "warranty": 0.10,
}

WEATHER_DAMAGE_POINTS = 30
WARRANTY_EXPIRED_POINTS = 25
AGE_FOR_MAX_RISK_YEARS = 40
MAINTENANCE_FOR_MAX_RISK_DAYS = 730
NO_MAINTENANCE_DAYS = 999

REPLACEMENT_COSTS = {
    "asphalt": 8000,
    "metal": 15000,
    "tile": 12000,
    "slate": 20000,
    "rubber": 10000,
}
DEFAULT_REPLACEMENT_COST = 10000

CONTINGENCY_BUFFER = 1.15

CONDITION_TREND_METRIC = "Overall Condition"
WEATHER_TREND_METRIC = "Weather Damage Frequency"


# ── Helper functions ───────────────────────────────────────────────────────

def _utc(value: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_months(value: datetime, months: int) -> datetime:
    """Shift *value* by whole months, clamping the day to the month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def determine_risk_level(risk_score: float) -> RiskLevel:
    if risk_score >= 80:
        return RiskLevel.CRITICAL
    if risk_score >= 60:
        return RiskLevel.HIGH
    if risk_score >= 35:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def estimate_replacement_cost(roof_type: Optional[str]) -> int:
    return REPLACEMENT_COSTS.get((roof_type or "").lower(), DEFAULT_REPLACEMENT_COST)


@dataclass(frozen=True)
class RiskFactors:
    """Inputs of the composite score, taken from the latest inspection."""
    age_years: float
    condition_score: float
    weather_damage: bool
    days_since_maintenance: int
    warranty_expired: bool


def compute_risk_score(factors: RiskFactors) -> float:
    """Weighted sum of the five risk factors, clamped to 0..100."""
    score = 0.0
    score += min(100.0, factors.age_years / AGE_FOR_MAX_RISK_YEARS * 100) * RISK_WEIGHTS["age"]
    score += (100 - factors.condition_score) * RISK_WEIGHTS["condition"]
    if factors.weather_damage:
        score += WEATHER_DAMAGE_POINTS * RISK_WEIGHTS["weather_damage"]
    maintenance_risk = min(100.0, factors.days_since_maintenance / MAINTENANCE_FOR_MAX_RISK_DAYS * 100)
    score += maintenance_risk * RISK_WEIGHTS["maintenance"]
    if factors.warranty_expired:
        score += WARRANTY_EXPIRED_POINTS * RISK_WEIGHTS["warranty"]
    return min(100.0, max(0.0, score))


def calculate_trend(values: Sequence[float]):
    """
    Compare the oldest and newest value of a newest-first series.

    Returns:
        (direction, change_rate_percent, significance)
    """
    if len(values) < 2:
        return TrendDirection.STABLE, 0.0, 0.0

    newest = values[0]
    oldest = values[-1]
    if oldest == 0:
        change_rate = 0.0 if newest == 0 else 100.0
    else:
        change_rate = (newest - oldest) / oldest * 100

    if change_rate > 5:
        direction = TrendDirection.IMPROVING
    elif change_rate < -5:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    significance = min(1.0, abs(change_rate) / 50)
    return direction, change_rate, significance


def sort_recommendations(recommendations: List[Recommendation]) -> List[Recommendation]:
    """Highest priority first; equal priorities keep insertion order."""
    return sorted(recommendations, key=lambda r: PRIORITY_RANK[r.priority], reverse=True)


class RiskAnalysisEngine:
    """Stateless risk analysis over an injected inspection store."""

    def __init__(
        self,
        store: InspectionStore,
        settings: Optional[Settings] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self._now = now or (lambda: datetime.now(timezone.utc))

    # ──────────────────────────── Public API ────────────────────────────

    async def analyze_property(
        self, property_id: str, prop: Optional[Property] = None
    ) -> Optional[RiskAnalysis]:
        """
        Analyze one property.

        Args:
            property_id: Property (roof) ID.
            prop:        The property record when the caller already has it;
                         fetched from the store otherwise.

        Returns:
            RiskAnalysis, or None when the property has no completed
            inspections or the store could not be read.
        """
        try:
            history = await self.store.get_inspection_history(property_id)
            if not history:
                logger.info(f"[RISK] No completed inspections for {property_id}")
                return None

            if prop is None:
                prop = await self.store.get_property(property_id)
            if prop is None:
                prop = Property(
                    id=property_id,
                    property_name=history[0].property_name or "Unknown Property",
                )

            return self.build_analysis(prop, history)

        except Exception as exc:
            logger.error(f"[RISK] Analysis failed for {property_id}: {exc}")
            return None

    async def analyze_portfolio(self) -> List[RiskAnalysis]:
        """
        Analyze every property in the store.

        Properties without history or whose analysis fails are skipped.
        Result is sorted by risk score, highest first.
        """
        try:
            properties = await self.store.list_properties()
        except Exception as exc:
            logger.error(f"[RISK] Portfolio analysis failed listing properties: {exc}")
            return []

        semaphore = asyncio.Semaphore(max(1, self.settings.PORTFOLIO_CONCURRENCY))

        async def _analyze(prop: Property) -> Optional[RiskAnalysis]:
            async with semaphore:
                try:
                    return await self.analyze_property(prop.id, prop)
                except Exception as exc:
                    logger.error(f"[RISK] Skipping {prop.id}: {exc}")
                    return None

        results = await asyncio.gather(*(_analyze(p) for p in properties))
        analyses = [a for a in results if a is not None]
        logger.info(
            f"[RISK] Portfolio sweep complete: {len(analyses)}/{len(properties)} properties analyzed"
        )
        return sorted(analyses, key=lambda a: a.risk_score, reverse=True)

    # ─────────────────────────── Scoring ───────────────────────────

    def build_analysis(self, prop: Property, history: List[InspectionRecord]) -> RiskAnalysis:
        """Pure analysis of a newest-first, non-empty inspection history."""
        latest = history[0]
        condition_scores = [self.condition_score(r) for r in history]
        weather_flags = [self.has_weather_damage(r) for r in history]

        factors = self.risk_factors(prop, condition_scores[0], weather_flags[0])
        risk_score = compute_risk_score(factors)
        trends = self.analyze_trends(condition_scores, weather_flags)
        recommendations = self.generate_recommendations(factors, prop.roof_type)

        return RiskAnalysis(
            property_id=prop.id,
            property_name=latest.property_name or prop.property_name or "Unknown Property",
            risk_score=risk_score,
            risk_level=determine_risk_level(risk_score),
            predicted_maintenance_date=self.predict_maintenance_date(condition_scores[0], trends),
            recommendations=recommendations,
            trends=trends,
            cost_estimate=self.estimate_cost(recommendations),
            confidence_score=self.confidence_score(len(history), latest.completed_date),
        )

    @staticmethod
    def condition_score(record: InspectionRecord) -> int:
        return score_condition(record.notes, (r.priority_level for r in record.reports))

    @staticmethod
    def has_weather_damage(record: InspectionRecord) -> bool:
        if record.weather_damage is not None:
            return record.weather_damage
        return mentions_weather_damage(record.weather_conditions, record.notes)

    def risk_factors(self, prop: Property, condition_score: int, weather_damage: bool) -> RiskFactors:
        return RiskFactors(
            age_years=prop.roof_age or 0,
            condition_score=condition_score,
            weather_damage=weather_damage,
            days_since_maintenance=self.days_since(prop.last_maintenance_date),
            warranty_expired=self.warranty_expired(prop.warranty_expiration),
        )

    def days_since(self, value: Optional[date]) -> int:
        """Whole days since *value*; NO_MAINTENANCE_DAYS when missing."""
        if value is None:
            return NO_MAINTENANCE_DAYS
        return (self._now().date() - value).days

    def warranty_expired(self, expiration: Optional[date]) -> bool:
        """A missing expiration date counts as expired."""
        if expiration is None:
            return True
        return expiration <= self._now().date()

    # ─────────────────────────── Trends ───────────────────────────

    @staticmethod
    def analyze_trends(condition_scores: Sequence[float], weather_flags: Sequence[bool]) -> List[TrendAnalysis]:
        """Condition and weather-damage trends; needs at least two inspections."""
        count = len(condition_scores)
        if count < 2:
            return []

        direction, change_rate, significance = calculate_trend(condition_scores)
        trends = [
            TrendAnalysis(
                metric=CONDITION_TREND_METRIC,
                direction=direction,
                change_rate=change_rate,
                timeframe=f"{count} inspections",
                significance_level=significance,
            )
        ]

        frequency = sum(1 for flag in weather_flags if flag) / len(weather_flags)
        # TODO: replace the 0.8/0.4 step with a continuous significance once
        # enough labelled storm history exists to fit one.
        trends.append(
            TrendAnalysis(
                metric=WEATHER_TREND_METRIC,
                direction=TrendDirection.DECLINING if frequency > 0.3 else TrendDirection.STABLE,
                change_rate=frequency * 100,
                timeframe=f"{count} inspections",
                significance_level=0.8 if frequency > 0.5 else 0.4,
            )
        )
        return trends

    # ─────────────────────── Recommendations ───────────────────────

    @staticmethod
    def generate_recommendations(factors: RiskFactors, roof_type: Optional[str] = None) -> List[Recommendation]:
        recommendations: List[Recommendation] = []

        if factors.age_years > 20:
            very_old = factors.age_years > 30
            recommendations.append(Recommendation(
                id="age-replacement",
                type=RecommendationType.PREVENTIVE,
                priority=Priority.HIGH if very_old else Priority.MEDIUM,
                description="Consider roof replacement due to age",
                estimated_cost=estimate_replacement_cost(roof_type),
                timeframe="1-2 years" if very_old else "3-5 years",
                risk_reduction=70,
            ))

        if factors.condition_score < 60:
            recommendations.append(Recommendation(
                id="condition-repair",
                type=RecommendationType.CORRECTIVE,
                priority=Priority.HIGH if factors.condition_score < 40 else Priority.MEDIUM,
                description="Address identified condition issues",
                estimated_cost=5000 + (60 - factors.condition_score) * 200,
                timeframe="3-6 months",
                risk_reduction=40,
            ))

        if factors.weather_damage:
            recommendations.append(Recommendation(
                id="weather-repair",
                type=RecommendationType.EMERGENCY,
                priority=Priority.CRITICAL,
                description="Repair weather-related damage immediately",
                estimated_cost=3000,
                timeframe="1-2 weeks",
                risk_reduction=50,
            ))

        if factors.days_since_maintenance > 365:
            recommendations.append(Recommendation(
                id="routine-maintenance",
                type=RecommendationType.PREVENTIVE,
                priority=Priority.MEDIUM if factors.days_since_maintenance > 730 else Priority.LOW,
                description="Schedule routine maintenance inspection",
                estimated_cost=500,
                timeframe="1-3 months",
                risk_reduction=25,
            ))

        if factors.warranty_expired:
            recommendations.append(Recommendation(
                id="warranty-renewal",
                type=RecommendationType.PREVENTIVE,
                priority=Priority.MEDIUM,
                description="Consider extending or renewing warranty coverage",
                estimated_cost=2000,
                timeframe="6-12 months",
                risk_reduction=20,
            ))

        return sort_recommendations(recommendations)

    # ───────────────────── Predictions & estimates ─────────────────────

    def predict_maintenance_date(self, condition_score: float, trends: List[TrendAnalysis]) -> datetime:
        months = 12.0
        if condition_score < 40:
            months = 3.0
        elif condition_score < 60:
            months = 6.0

        condition_trend = next((t for t in trends if t.metric == CONDITION_TREND_METRIC), None)
        if condition_trend is not None:
            if condition_trend.direction == TrendDirection.DECLINING:
                months = max(1.0, months * 0.7)
            elif condition_trend.direction == TrendDirection.IMPROVING:
                months = min(24.0, months * 1.3)

        # Fractional months truncate
        return add_months(self._now(), int(months))

    @staticmethod
    def estimate_cost(recommendations: List[Recommendation]) -> float:
        """Sum of recommendation costs plus a 15% contingency buffer."""
        base_cost = sum(r.estimated_cost for r in recommendations)
        return float(round(base_cost * CONTINGENCY_BUFFER))

    def confidence_score(self, inspection_count: int, latest_completed: datetime) -> float:
        confidence = 0.5
        confidence += min(0.3, inspection_count * 0.05)
        days_since_latest = (self._now() - _utc(latest_completed)).total_seconds() / 86400
        confidence += max(0.0, 0.2 - days_since_latest / 365 * 0.1)
        return min(1.0, max(0.0, confidence))
