import os
from collections.abc import Mapping
from pathlib import Path

ENV_VAR = "PAPERBUILD_ENV"
DEVELOPMENT_VALUES = frozenset({"development", "dev"})


def detect_development_mode(environ: Mapping[str, str] | None = None) -> bool:
    """
    Build-mode flag. Production unless PAPERBUILD_ENV says development.
    """
    env = os.environ if environ is None else environ
    return env.get(ENV_VAR, "production").strip().lower() in DEVELOPMENT_VALUES


class Settings:
    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        env = os.environ if environ is None else environ
        self.base_dir = Path(env.get("PAPERBUILD_BASE_DIR", os.getcwd()))
        self.rules_path = Path(env.get("PAPERBUILD_RULES", self.base_dir / "site.yaml"))
        self.content_dir = Path(
            env.get("PAPERBUILD_CONTENT_DIR", self.base_dir / "content" / "blog")
        )
        self.out_dir = Path(env.get("PAPERBUILD_OUT_DIR", self.base_dir / "dist"))
        self.is_development_mode = detect_development_mode(env)
        self.version = env.get("PAPERBUILD_VERSION", "local")
