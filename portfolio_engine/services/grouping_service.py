"""
Grouping Service
Partitions a property list into inspection batches.

Strategies:
  geographic        greedy single pass, candidates within max_distance of the seed
  property_manager  exact partition on manager name ("Unassigned" when missing)
  risk_based        high ≥ 80, medium ≥ 60, else low
  custom            rule set: size/distance limits, same-manager partitioning,
                    risk-first seeding, seasonal month exclusion

Optimization score (0–100, informational):
  100 − 5 per member beyond 10
      + 20 for manager groups
      − min(30, (avg_distance − 25) × 2) when spread > 25 miles
      + 15 for risk groups whose mean score > 70
"""
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from portfolio_engine.core.config import Settings, get_settings
from portfolio_engine.schemas.grouping import (
    GroupingRules,
    GroupMetadata,
    GroupType,
    MonthRecommendation,
    PropertyGroup,
)
from portfolio_engine.schemas.property import Property
from portfolio_engine.services.geo import centroid, distance, has_coordinates, split_by_coordinates
from portfolio_engine.services.inspection_store import InspectionStore

logger = logging.getLogger(__name__)

UNASSIGNED_MANAGER = "Unassigned"

# month -> (recommended, conditions)
DEFAULT_SEASONAL_TABLE = {
    1: (False, ["Cold weather", "Snow/Ice"]),
    2: (False, ["Cold weather", "Snow/Ice"]),
    3: (True, ["Mild weather"]),
    4: (True, ["Optimal conditions"]),
    5: (True, ["Optimal conditions"]),
    6: (True, ["Good weather"]),
    7: (False, ["Hot weather"]),
    8: (False, ["Hot weather"]),
    9: (True, ["Optimal conditions"]),
    10: (True, ["Optimal conditions"]),
    11: (True, ["Mild weather"]),
    12: (False, ["Cold weather"]),
}

_PREFIXES = {
    GroupType.GEOGRAPHIC: "geo",
    GroupType.PROPERTY_MANAGER: "pm",
    GroupType.RISK_BASED: "risk",
    GroupType.CUSTOM: "custom",
    GroupType.SEASONAL: "season",
}


# ── Helper functions ───────────────────────────────────────────────────────

def default_seasonal_recommendations() -> List[MonthRecommendation]:
    return [
        MonthRecommendation(month=month, recommended=recommended, conditions=list(conditions))
        for month, (recommended, conditions) in DEFAULT_SEASONAL_TABLE.items()
    ]


def _months_between(start: date, end: date) -> float:
    """Elapsed months using 30-day months."""
    return (end - start).days / 30


def property_risk_score(prop: Property, today: Optional[date] = None) -> float:
    """
    Attribute-only risk estimate for properties without an analysis.

    Inspection recency (none 40, >24mo 30, >12mo 20, >6mo 10), warranty
    (expired 25, <6mo left 15), safety concerns 20, customer sensitivity
    (High 15, Medium 10), roof rating (≤3 20, ≤5 10). Capped at 100.
    """
    today = today or datetime.now(timezone.utc).date()
    score = 0

    if prop.last_inspection_date:
        months_since = _months_between(prop.last_inspection_date, today)
        if months_since > 24:
            score += 30
        elif months_since > 12:
            score += 20
        elif months_since > 6:
            score += 10
    else:
        score += 40

    if prop.warranty_expiration:
        months_to_expiry = _months_between(today, prop.warranty_expiration)
        if months_to_expiry < 0:
            score += 25
        elif months_to_expiry < 6:
            score += 15

    if prop.safety_concerns:
        score += 20

    if prop.customer_sensitivity == "High":
        score += 15
    elif prop.customer_sensitivity == "Medium":
        score += 10

    if prop.roof_rating:
        if prop.roof_rating <= 3:
            score += 20
        elif prop.roof_rating <= 5:
            score += 10

    return float(min(100, score))


def risk_tier(score: float) -> str:
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


def calculate_optimization_score(group: PropertyGroup) -> float:
    score = 100.0
    size = len(group.properties)

    if size > 10:
        score -= (size - 10) * 5

    if group.group_type == GroupType.PROPERTY_MANAGER:
        score += 20

    avg_distance = group.metadata.average_distance
    if avg_distance and avg_distance > 25:
        score -= min(30.0, (avg_distance - 25) * 2)

    mean_risk = group.metadata.risk_score
    if group.group_type == GroupType.RISK_BASED and mean_risk and mean_risk > 70:
        score += 15

    return max(0.0, min(100.0, score))


class GroupingService:
    """Stateless grouping strategies plus the seasonal lookup."""

    def __init__(
        self,
        store: Optional[InspectionStore] = None,
        settings: Optional[Settings] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self._now = now or (lambda: datetime.now(timezone.utc))

    # ──────────────────────────── Strategies ────────────────────────────

    def group_by_geographic_proximity(
        self,
        properties: List[Property],
        max_group_size: Optional[int] = None,
        max_distance: Optional[float] = None,
    ) -> List[PropertyGroup]:
        """Greedy seed-based clustering; properties without coordinates are dropped."""
        max_group_size = max_group_size if max_group_size is not None else self.settings.DEFAULT_MAX_GROUP_SIZE
        if max_group_size < 1:
            raise ValueError(f"max_group_size must be at least 1, got {max_group_size}")
        max_distance = max_distance if max_distance is not None else self.settings.DEFAULT_MAX_DISTANCE_MILES

        located, missing = split_by_coordinates(properties)
        if missing:
            logger.warning(
                f"[GROUPING] {len(missing)} properties lack coordinates and were excluded"
            )

        clusters = self._cluster(located, max_group_size, max_distance, assigned=set())
        groups = []
        for members in clusters:
            seed = members[0]
            groups.append(self._build_group(
                GroupType.GEOGRAPHIC,
                f"Geographic Group - {seed.city}, {seed.state}",
                members,
            ))
        logger.info(f"[GROUPING] {len(located)} properties -> {len(groups)} geographic groups")
        return groups

    def group_by_property_manager(self, properties: List[Property]) -> List[PropertyGroup]:
        partitions = self._partition_by_manager(properties)
        return [
            self._build_group(
                GroupType.PROPERTY_MANAGER,
                f"PM Group - {manager}",
                members,
                property_manager=manager,
            )
            for manager, members in partitions.items()
        ]

    def group_by_risk(
        self,
        properties: List[Property],
        risk_scores: Optional[Dict[str, float]] = None,
    ) -> List[PropertyGroup]:
        """
        Partition into risk tiers.

        Args:
            properties:  Properties to group.
            risk_scores: Property ID -> score, e.g. from the risk analysis
                         engine. Properties missing from it fall back to the
                         attribute-only estimate.
        """
        scores = self._resolve_scores(properties, risk_scores)
        tiers: Dict[str, List[Property]] = {}
        for prop in properties:
            tiers.setdefault(risk_tier(scores[prop.id]), []).append(prop)

        groups = []
        for tier, members in tiers.items():
            mean_score = sum(scores[p.id] for p in members) / len(members)
            groups.append(self._build_group(
                GroupType.RISK_BASED,
                f"Risk Group - {tier.upper()}",
                members,
                risk_score=mean_score,
            ))
        return groups

    def group_by_custom_rules(
        self,
        properties: List[Property],
        rules: Optional[GroupingRules] = None,
        risk_scores: Optional[Dict[str, float]] = None,
        target_month: Optional[int] = None,
        name: str = "Custom",
    ) -> List[PropertyGroup]:
        """
        Group under a caller-defined rule set.

        Every group still satisfies the geographic predicate: members are
        within max_distance_miles of their seed and the group holds at most
        max_group_size properties.
        """
        rules = rules or GroupingRules()

        if target_month is not None and target_month in rules.seasonal_restrictions.avoid_months:
            logger.warning(f"[GROUPING] Month {target_month} is excluded by '{name}' rules; no groups built")
            return []

        located, missing = split_by_coordinates(properties)
        if missing:
            logger.warning(
                f"[GROUPING] {len(missing)} properties lack coordinates and were excluded"
            )

        scores = None
        if rules.priority_by_risk:
            scores = self._resolve_scores(located, risk_scores)
            located = sorted(located, key=lambda p: scores[p.id], reverse=True)

        if rules.prefer_same_pm:
            partitions = list(self._partition_by_manager(located).items())
        else:
            partitions = [(None, located)]

        groups = []
        for manager, members in partitions:
            clusters = self._cluster(members, rules.max_group_size, rules.max_distance_miles, assigned=set())
            for cluster in clusters:
                groups.append(self._build_group(
                    GroupType.CUSTOM,
                    f"{name} Group {len(groups) + 1}",
                    cluster,
                    property_manager=manager,
                    risk_score=(sum(scores[p.id] for p in cluster) / len(cluster)) if scores else None,
                ))
        return groups

    @staticmethod
    def unlocated_ids(properties: List[Property]) -> List[str]:
        """IDs that geographic and custom grouping leave out for lack of coordinates."""
        return [p.id for p in split_by_coordinates(properties)[1]]

    # ─────────────────────────── Seasonal ───────────────────────────

    async def get_seasonal_recommendations(
        self,
        client_id: Optional[str] = None,
        region: Optional[str] = None,
    ) -> List[MonthRecommendation]:
        """Twelve month entries from stored preferences, or the default table."""
        if self.store is None:
            return default_seasonal_recommendations()

        try:
            preference = await self.store.get_seasonal_preferences(client_id, region)
        except Exception as exc:
            logger.error(f"[GROUPING] Seasonal preference lookup failed: {exc}")
            return default_seasonal_recommendations()

        if preference is None:
            return default_seasonal_recommendations()

        return [
            MonthRecommendation(
                month=month,
                recommended=month in preference.preferred_months,
                conditions=list(preference.avoid_conditions),
            )
            for month in range(1, 13)
        ]

    # ─────────────────────────── Internals ───────────────────────────

    @staticmethod
    def _cluster(
        properties: List[Property],
        max_group_size: int,
        max_distance: float,
        assigned: Set[str],
    ) -> List[List[Property]]:
        """
        Seed-based greedy clustering over locatable properties.

        *assigned* holds the IDs already placed and is updated in place.
        """
        clusters: List[List[Property]] = []
        for seed in properties:
            if seed.id in assigned:
                continue
            members = [seed]
            assigned.add(seed.id)

            for candidate in properties:
                if len(members) >= max_group_size:
                    break
                if candidate.id in assigned:
                    continue
                if distance(seed.latitude, seed.longitude, candidate.latitude, candidate.longitude) <= max_distance:
                    members.append(candidate)
                    assigned.add(candidate.id)

            clusters.append(members)
        return clusters

    @staticmethod
    def _partition_by_manager(properties: List[Property]) -> Dict[str, List[Property]]:
        partitions: Dict[str, List[Property]] = {}
        for prop in properties:
            partitions.setdefault(prop.property_manager_name or UNASSIGNED_MANAGER, []).append(prop)
        return partitions

    def _resolve_scores(
        self, properties: List[Property], risk_scores: Optional[Dict[str, float]]
    ) -> Dict[str, float]:
        today = self._now().date()
        supplied = risk_scores or {}
        return {
            p.id: supplied[p.id] if p.id in supplied else property_risk_score(p, today)
            for p in properties
        }

    def _build_group(
        self,
        group_type: GroupType,
        name: str,
        members: List[Property],
        property_manager: Optional[str] = None,
        risk_score: Optional[float] = None,
    ) -> PropertyGroup:
        timestamp = self._now()
        metadata = GroupMetadata(
            total_area=sum(p.roof_area or 0 for p in members),
            property_manager=property_manager,
            risk_score=risk_score,
        )

        if group_type in (GroupType.GEOGRAPHIC, GroupType.CUSTOM):
            center = centroid(members)
            if center is not None:
                metadata.center_lat, metadata.center_lng = center
                located = [p for p in members if has_coordinates(p)]
                distances = [distance(center[0], center[1], p.latitude, p.longitude) for p in located]
                metadata.average_distance = sum(distances) / len(distances)

        group = PropertyGroup(
            id=f"{_PREFIXES[group_type]}-{uuid.uuid4().hex[:12]}",
            name=name,
            group_type=group_type,
            properties=members,
            metadata=metadata,
            created_at=timestamp,
            updated_at=timestamp,
        )
        group.metadata.optimization_score = calculate_optimization_score(group)
        return group
