"""Class feature and feat aggregation.

Each class grants features at class levels. A grant is active once the
actor's level in that class reaches the grant level, and its scaling
value comes from the referenced feature definition's scaling table.
Grants of the same feature by several classes merge into one entry that
lists every source.
"""

from __future__ import annotations

from collections.abc import Mapping

from thirdera.core.logging import get_logger
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import (
    ClassFeature,
    FeatureAggregation,
    FeatureSource,
    GrantedFeature,
)
from thirdera.models.items import FeatureItem, ScalingRow


logger = get_logger(__name__)

DEFAULT_FEATURE_TYPE = "feature"


def resolve_scaling_value(table: list[ScalingRow], class_level: int) -> str | None:
    """Value of the row with the greatest ``min_level`` not above the level.

    Returns:
        The row value, or None when no row applies.
    """
    best: ScalingRow | None = None
    for row in table:
        if row.min_level <= class_level and (best is None or row.min_level > best.min_level):
            best = row
    return best.value if best is not None else None


def _lookup_feature(
    snapshot: ActorSnapshot,
    feat_item_id: str | None,
    library: Mapping[str, FeatureItem] | None,
) -> FeatureItem | None:
    if not feat_item_id:
        return None
    feature = snapshot.features.get(feat_item_id)
    if feature is None and library is not None:
        feature = library.get(feat_item_id)
    return feature


def aggregate_features(
    snapshot: ActorSnapshot,
    library: Mapping[str, FeatureItem] | None = None,
) -> FeatureAggregation:
    """Collect active class features and merge them by feature key.

    When several classes grant the same feature, the scaling value from
    the class with the highest level wins; on equal levels the earlier
    class keeps its value, and an unresolved value never replaces a
    resolved one.

    Args:
        snapshot: The indexed actor.
        library: Optional feature definitions keyed by id, consulted
            after the actor's own feature items.

    Returns:
        FeatureAggregation with merged features and features per class.
    """
    merged: dict[str, GrantedFeature] = {}
    winning_level: dict[str, int] = {}
    by_class: dict[str, list[ClassFeature]] = {}

    for class_item, class_level in snapshot.classes_with_levels:
        class_features: list[ClassFeature] = []

        for grant in class_item.features:
            if grant.level > class_level:
                continue

            feature = _lookup_feature(snapshot, grant.feat_item_id, library)
            if feature is None:
                logger.debug(
                    "Feature definition not found",
                    actor=snapshot.actor.name,
                    class_name=class_item.name,
                    feat_key=grant.feat_key,
                    feat_item_id=grant.feat_item_id,
                )
                scaling_value = None
                feature_type = DEFAULT_FEATURE_TYPE
            else:
                scaling_value = resolve_scaling_value(feature.scaling_table, class_level)
                feature_type = feature.kind

            class_features.append(
                ClassFeature(
                    feat_key=grant.feat_key,
                    feat_name=grant.feat_name,
                    feat_item_id=grant.feat_item_id,
                    grant_level=grant.level,
                    class_item_id=class_item.id,
                    class_name=class_item.name,
                    class_level=class_level,
                    scaling_value=scaling_value,
                    type=feature_type,
                )
            )

            source = FeatureSource(class_name=class_item.name, grant_level=grant.level)
            existing = merged.get(grant.feat_key)
            if existing is None:
                merged[grant.feat_key] = GrantedFeature(
                    feat_key=grant.feat_key,
                    feat_name=grant.feat_name,
                    feat_item_id=grant.feat_item_id,
                    type=feature_type,
                    scaling_value=scaling_value,
                    sources=[source],
                )
                winning_level[grant.feat_key] = class_level
                continue

            update: dict[str, object] = {
                "sources": [*existing.sources, source],
                "is_duplicate": True,
            }
            if scaling_value is not None and (
                existing.scaling_value is None or class_level > winning_level[grant.feat_key]
            ):
                update["scaling_value"] = scaling_value
                winning_level[grant.feat_key] = class_level
            merged[grant.feat_key] = existing.model_copy(update=update)

        if class_features:
            by_class[class_item.id] = class_features

    return FeatureAggregation(granted=list(merged.values()), by_class=by_class)


__all__ = [
    "resolve_scaling_value",
    "aggregate_features",
]
