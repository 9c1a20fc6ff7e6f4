from __future__ import annotations
import os
import sys
import tomllib
from pathlib import Path
from typing import Dict, List, Mapping, Optional

USER_CFG = Path.home() / ".config" / "qa-casegen" / "config.toml"
PROJECT_CFG = Path.cwd() / "qa-casegen.toml"

PROVIDER_NAMES = ("openai", "gemini", "claude")

DEFAULT_MODELS: Dict[str, str] = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-1.5-flash",
    "claude": "claude-3-5-sonnet-latest",
}

DEFAULT_BASE_URLS: Dict[str, str] = {
    "openai": "https://api.openai.com/v1",
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "claude": "https://api.anthropic.com/v1/",
}

API_KEY_ENV: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}

DEFAULTS: Dict[str, object] = {
    "format": "gherkin",
    "providers": list(PROVIDER_NAMES),
    "temperature": 0.2,
    "max_tokens": 2048,
    "history_path": str(Path.home() / ".local" / "share" / "qa-casegen" / "history.json"),
    "history_limit": 20,
}

def _read_toml(path: Path) -> Dict:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Warning: ignoring malformed config {path}: {e}", file=sys.stderr)
        return {}

def init_default_config(force: bool = False, target: Optional[Path] = None) -> Path:
    target = target or USER_CFG
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.exists() and not force:
        return target
    text = """# qa-casegen config (user)
# You can override any of these in a project-local ./qa-casegen.toml

# Defaults
format = "gherkin"          # or "plain"
providers = ["openai", "gemini", "claude"]
temperature = 0.2
max_tokens = 2048

# Run history
history_limit = 20

# API keys are read from OPENAI_API_KEY, GEMINI_API_KEY and ANTHROPIC_API_KEY

# Models per provider
[models]
openai = "gpt-4o-mini"
gemini = "gemini-1.5-flash"
claude = "claude-3-5-sonnet-latest"
"""
    target.write_text(text)
    return target

def _coerce(name: str, v):
    if v is None:
        return None
    try:
        if name == "temperature":
            return float(v)
        if name in {"max_tokens", "history_limit"}:
            n = int(v)
            return n if n > 0 else None
        if name == "format":
            s = str(v).strip().lower()
            return s if s in {"gherkin", "plain"} else None
        if name == "providers":
            items = v.split(",") if isinstance(v, str) else list(v)
            picked = [str(p).strip().lower() for p in items if str(p).strip()]
            return picked if picked and all(p in PROVIDER_NAMES for p in picked) else None
    except (TypeError, ValueError):
        return None
    return v

def merged_config(
    user_cfg: Optional[Path] = None,
    project_cfg: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict:
    cfg_user = _read_toml(user_cfg or USER_CFG)
    cfg_proj = _read_toml(project_cfg or PROJECT_CFG)
    environ = os.environ if environ is None else environ

    # environment overrides
    env = {
        "format": environ.get("QA_CASEGEN_FORMAT"),
        "providers": environ.get("QA_CASEGEN_PROVIDERS"),
        "temperature": environ.get("QA_CASEGEN_TEMPERATURE"),
        "max_tokens": environ.get("QA_CASEGEN_MAX_TOKENS"),
        "history_path": environ.get("QA_CASEGEN_HISTORY_PATH"),
        "history_limit": environ.get("QA_CASEGEN_HISTORY_LIMIT"),
    }

    # merge: defaults -> user -> project -> env
    settings = DEFAULTS.copy()
    def overlay(d: Dict):
        if not isinstance(d, dict): return
        for k in settings.keys():
            if k in d:
                v = _coerce(k, d[k])
                if v is not None:
                    settings[k] = v
    overlay(cfg_user)
    overlay(cfg_proj)
    overlay(env)

    models = DEFAULT_MODELS.copy()
    models.update(cfg_user.get("models", {}))
    models.update(cfg_proj.get("models", {}))

    base_urls = DEFAULT_BASE_URLS.copy()
    base_urls.update(cfg_user.get("base_urls", {}))
    base_urls.update(cfg_proj.get("base_urls", {}))

    api_keys = {name: environ.get(var) for name, var in API_KEY_ENV.items()}

    return {"models": models, "base_urls": base_urls, "api_keys": api_keys, **settings}

def enabled_providers(config: Mapping) -> List[str]:
    """Configured providers that also have an API key."""
    return [p for p in config["providers"] if config["api_keys"].get(p)]
