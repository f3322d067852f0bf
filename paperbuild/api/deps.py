from functools import lru_cache

from fastapi import Depends

from paperbuild.adapters.clock import SystemClock
from paperbuild.app_shell.build import BuildContext
from paperbuild.app_shell.config import Settings
from paperbuild.components.postfilter import ClockPort
from paperbuild.rules.loader import load_rules
from paperbuild.rules.models import SiteRules


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> SiteRules:
    return load_rules(get_settings().rules_path)


# --- Clock ---
def get_clock() -> ClockPort:
    return SystemClock()


# --- Build Context ---
def get_build_context(
    settings: Settings = Depends(get_settings),
    rules: SiteRules = Depends(get_rules),
    clock: ClockPort = Depends(get_clock),
) -> BuildContext:
    return BuildContext.create(settings, clock, rules=rules)
