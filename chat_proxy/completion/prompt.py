from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from chat_proxy.core.settings import Settings
from chat_proxy.errors import StartupConfigurationError

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"


@dataclass(frozen=True)
class PromptTemplate:
    """System prompt plus sampling parameters, fixed for the life of the process."""
    system_prompt: str
    max_tokens: int
    temperature: float


def available_profiles() -> List[str]:
    return sorted(p.stem for p in PROMPTS_DIR.glob("*.md"))


def _prompt_path(settings: Settings) -> Path:
    if settings.system_prompt_file is not None:
        return settings.system_prompt_file
    path = PROMPTS_DIR / f"{settings.prompt_profile}.md"
    if not path.is_file():
        raise StartupConfigurationError(
            f"unknown prompt profile {settings.prompt_profile!r} "
            f"(available: {', '.join(available_profiles())})"
        )
    return path


def load_prompt_template(settings: Settings) -> PromptTemplate:
    path = _prompt_path(settings)
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise StartupConfigurationError(f"cannot read system prompt {path}: {e}") from e
    if not text:
        raise StartupConfigurationError(f"system prompt {path} is empty")
    return PromptTemplate(
        system_prompt=text,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def build_messages(template: PromptTemplate, message: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": template.system_prompt},
        {"role": "user", "content": message},
    ]
