from __future__ import annotations

from ceahub.core.config import settings
from ceahub.core.rewards import RewardPolicy
from ceahub.services.supabase_gateway import SupabaseGateway, get_supabase_gateway


def get_reward_policy() -> RewardPolicy:
    return RewardPolicy.from_settings(settings)


def get_gateway() -> SupabaseGateway:
    return get_supabase_gateway()


def enforce_status_transitions() -> bool:
    return settings.ENFORCE_STATUS_TRANSITIONS
