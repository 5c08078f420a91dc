"""Owner-facing rate plan management."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction  # type: ignore

from apps.properties.models import Property
from shared.domain.exceptions import PropertyNotFoundError, RatePlanNotFoundError

from .models import CancellationPolicy, RatePlan

logger = logging.getLogger(__name__)

OWNERSHIP_ERROR = "Property not found or you do not have permission"


def _owned_property(property_id, user) -> Property:
    prop = Property.objects.filter(pk=property_id).first()
    if prop is None or not prop.is_owned_by(getattr(user, "pk", None)):
        raise PropertyNotFoundError(OWNERSHIP_ERROR)
    return prop


def _owned_rate_plan(property_id, rate_plan_id, user) -> RatePlan:
    prop = _owned_property(property_id, user)
    rate_plan = RatePlan.objects.filter(pk=rate_plan_id, property=prop).first()
    if rate_plan is None:
        raise RatePlanNotFoundError()
    return rate_plan


def _save_policy(rate_plan: RatePlan, policy_data: Mapping[str, Any] | None) -> None:
    if policy_data is None:
        return
    CancellationPolicy.objects.update_or_create(rate_plan=rate_plan, defaults=dict(policy_data))


def list_rate_plans(property_id, user=None):
    """All plans for the owner, active plans for everybody else."""

    prop = Property.objects.filter(pk=property_id).first()
    if prop is None:
        raise PropertyNotFoundError()
    queryset = RatePlan.objects.for_property(prop.pk).select_related("cancellation_policy").by_priority()
    if not prop.is_owned_by(getattr(user, "pk", None)):
        queryset = queryset.active()
    return queryset


@transaction.atomic
def create_rate_plan(
    property_id,
    user,
    data: Mapping[str, Any],
    policy_data: Mapping[str, Any] | None = None,
) -> RatePlan:
    prop = _owned_property(property_id, user)
    rate_plan = RatePlan.objects.create(property=prop, **data)
    _save_policy(rate_plan, policy_data)
    logger.info(f"Rate plan {rate_plan.pk} created for property {prop.pk} by user {user.pk}")
    return rate_plan


@transaction.atomic
def update_rate_plan(
    property_id,
    rate_plan_id,
    user,
    data: Mapping[str, Any],
    policy_data: Mapping[str, Any] | None = None,
) -> RatePlan:
    rate_plan = _owned_rate_plan(property_id, rate_plan_id, user)
    for field, value in data.items():
        setattr(rate_plan, field, value)
    rate_plan.save()
    _save_policy(rate_plan, policy_data)
    logger.info(f"Rate plan {rate_plan.pk} updated by user {user.pk}")
    return rate_plan


@transaction.atomic
def delete_rate_plan(property_id, rate_plan_id, user) -> bool:
    """Delete the plan, or deactivate it while reservations still reference it.

    Returns True when the row was deleted.
    """

    rate_plan = _owned_rate_plan(property_id, rate_plan_id, user)
    if rate_plan.reservations.exists():
        if rate_plan.is_active:
            rate_plan.is_active = False
            rate_plan.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Rate plan {rate_plan.pk} has reservations, deactivated instead of deleted")
        return False
    rate_plan.delete()
    logger.info(f"Rate plan {rate_plan_id} deleted by user {user.pk}")
    return True
