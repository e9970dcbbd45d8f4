# src/claude_mode/providers/builtin.py
"""Built-in providers, the OpenRouter model table and provider aliases."""

from __future__ import annotations

from claude_mode.config.env_vars import EnvVar
from claude_mode.providers.models import DiscoveryMode, Model, Provider

OPENROUTER = "openrouter"
OLLAMA_CLOUD = "ollama-cloud"
OLLAMA_LOCAL = "ollama-local"
OLLAMA_CUSTOM = "ollama-custom"

OPENROUTER_BASE_URL = "https://openrouter.ai/api"
OLLAMA_CLOUD_BASE_URL = "https://ollama.com"
OLLAMA_LOCAL_BASE_URL = "http://localhost:11434"
OLLAMA_CUSTOM_BASE_URL = "http://192.168.86.101:11434"

# Ollama servers accept any token; the agent just needs one to be present
OLLAMA_DUMMY_TOKEN = "ollama"

OPENROUTER_MODELS: tuple[Model, ...] = (
    Model(id="openai/gpt-5.2", name="GPT-5.2", shortcut="gpt52"),
    Model(id="openai/gpt-5.2-pro", name="GPT-5.2 Pro", shortcut="gpt52-pro"),
    Model(id="openai/gpt-5.2-codex", name="GPT-5.2 Codex", shortcut="gpt52-codex"),
    Model(id="anthropic/claude-opus-4.5", name="Claude Opus 4.5", shortcut="opus"),
    Model(id="x-ai/grok-4.1-fast", name="Grok 4.1 Fast", shortcut="grok"),
    Model(id="deepseek/deepseek-v3.2", name="DeepSeek V3.2", shortcut="deepseek"),
    Model(
        id="z-ai/glm-4.7-flash",
        name="Z.AI GLM 4.7 Flash",
        shortcut="zai-glm47-flash",
    ),
    Model(
        id="anthropic/claude-sonnet-4.5", name="Claude Sonnet 4.5", shortcut="sonnet"
    ),
    Model(id="anthropic/claude-haiku-4.5", name="Claude Haiku 4.5", shortcut="haiku"),
    Model(
        id="@preset/gpt-oss-120b-cerebras",
        name="GPT-OSS 120B (Cerebras)",
        shortcut="gpt120",
    ),
    Model(
        id="@preset/cerebras-glm-4-7-cerebras",
        name="GLM 4.7 (Cerebras)",
        shortcut="glm47",
    ),
    Model(id="z-ai/glm-4.7", name="Z.AI GLM 4.7", shortcut="zai-glm47"),
    Model(
        id="google/gemini-3-pro-preview",
        name="Gemini 3 Pro Preview",
        shortcut="gemini-pro",
    ),
    Model(
        id="google/gemini-3-flash-preview",
        name="Gemini 3 Flash Preview",
        shortcut="gemini-flash",
    ),
)

BUILTIN_PROVIDERS: tuple[Provider, ...] = (
    Provider(
        key=OPENROUTER,
        name="OpenRouter",
        description="OpenRouter API (Claude, Gemini, GPT-OSS, GLM)",
        discovery_mode=DiscoveryMode.STATIC,
        base_url_env=(EnvVar.ANTHROPIC_BASE_URL.value,),
        default_base_url=OPENROUTER_BASE_URL,
        auth_token_env=(
            EnvVar.ANTHROPIC_AUTH_TOKEN.value,
            EnvVar.OPEN_ROUTER_API_KEY.value,
        ),
        models=OPENROUTER_MODELS,
    ),
    Provider(
        key=OLLAMA_CLOUD,
        name="Ollama Cloud",
        description="Ollama Cloud",
        discovery_mode=DiscoveryMode.DYNAMIC_API,
        base_url_env=(EnvVar.OLLAMA_HOST.value,),
        default_base_url=OLLAMA_CLOUD_BASE_URL,
        auth_token_env=(EnvVar.OLLAMA_API_KEY.value,),
    ),
    Provider(
        key=OLLAMA_LOCAL,
        name="Ollama Local",
        discovery_mode=DiscoveryMode.DYNAMIC_API,
        base_url_env=(EnvVar.OLLAMA_BASE_URL_LOCAL.value,),
        default_base_url=OLLAMA_LOCAL_BASE_URL,
        default_auth_token=OLLAMA_DUMMY_TOKEN,
    ),
    Provider(
        key=OLLAMA_CUSTOM,
        name="Ollama Custom",
        discovery_mode=DiscoveryMode.DYNAMIC_API,
        base_url_env=(EnvVar.OLLAMA_BASE_URL_CUSTOM.value,),
        default_base_url=OLLAMA_CUSTOM_BASE_URL,
        default_auth_token=OLLAMA_DUMMY_TOKEN,
    ),
)

# Providers whose token must come from the user (everything else has a default)
PROVIDER_KEY_ENV: dict[str, EnvVar] = {
    OPENROUTER: EnvVar.OPEN_ROUTER_API_KEY,
    OLLAMA_CLOUD: EnvVar.OLLAMA_API_KEY,
}

PROVIDER_ALIASES: dict[str, str] = {
    "or": OPENROUTER,
    "open": OPENROUTER,
    "oc": OLLAMA_CLOUD,
    "cloud": OLLAMA_CLOUD,
    "ol": OLLAMA_LOCAL,
    "local": OLLAMA_LOCAL,
    "custom": OLLAMA_CUSTOM,
    "remote": OLLAMA_CUSTOM,
}


def resolve_provider_alias(value: str) -> str:
    """Map a short alias to its provider key; anything else is returned as-is."""
    return PROVIDER_ALIASES.get(value, value)
