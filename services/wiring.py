"""
Service wiring.

Builds the engine's object graph from settings, a configuration provider and a
pair of repositories. The API and the scripts share this so both run the same
services against the same stores.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from config.provider import ConfigProvider, EnvironmentConfigProvider
from config.settings import AppSettings, load_settings
from domain.time import utc_now
from repositories.base import CouponRepository, RuleRepository
from services.code_generator import CodeGenerator
from services.coupon_issuance_service import CouponIssuanceService
from services.customer_event_handler import CustomerEventHandler
from services.monthly_rule_manager import MonthlyRuleManager
from services.prune_job import PruneJob


@dataclass(frozen=True, slots=True)
class Services:
    settings: AppSettings
    config: ConfigProvider
    generator: CodeGenerator
    manager: MonthlyRuleManager
    issuance: CouponIssuanceService
    events: CustomerEventHandler
    prune_job: PruneJob


def build_services(
    *,
    settings: AppSettings,
    config: ConfigProvider,
    rules: RuleRepository,
    coupons: CouponRepository,
    clock: Callable[[], datetime] = utc_now,
) -> Services:
    generator = CodeGenerator(
        salt=settings.salt,
        epoch=settings.epoch,
        alphabet=settings.alphabet(),
        code_length=settings.code_length,
    )
    manager = MonthlyRuleManager(
        rules=rules,
        coupons=coupons,
        config=config,
        rule_name_prefix=settings.rule_name_prefix,
        default_website_id=settings.default_website_id,
        timezone=settings.timezone(),
        clock=clock,
    )
    issuance = CouponIssuanceService(generator=generator, manager=manager, clock=clock)
    return Services(
        settings=settings,
        config=config,
        generator=generator,
        manager=manager,
        issuance=issuance,
        events=CustomerEventHandler(issuance=issuance, config=config),
        prune_job=PruneJob(manager=manager, config=config, clock=clock),
    )


def build_supabase_services(settings: Optional[AppSettings] = None) -> Services:
    """Production wiring: environment settings and Supabase repositories."""

    from repositories.client import create_supabase_client
    from repositories.coupon_repository import SupabaseCouponRepository
    from repositories.rule_repository import SupabaseRuleRepository

    settings = settings or load_settings()
    client = create_supabase_client()
    return build_services(
        settings=settings,
        config=EnvironmentConfigProvider(),
        rules=SupabaseRuleRepository(client),
        coupons=SupabaseCouponRepository(client),
    )


__all__ = ["Services", "build_services", "build_supabase_services"]
