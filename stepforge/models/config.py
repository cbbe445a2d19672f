"""Per-project configuration document."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from stepforge.core._files import atomic_write_text

DEFAULT_AI_INSTRUCTION = "You are an expert book authoring AI."
DEFAULT_MODEL = "gpt-5-mini"


class ProjectConfig(BaseModel):
    """Configuration written by the ``init`` step and handed to every step.

    Stored at ``<state_dir>/config.json``. A project with no config file
    gets the defaults. An unreadable file raises ``ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    ai_instruction: str = DEFAULT_AI_INSTRUCTION
    model: str = DEFAULT_MODEL

    @classmethod
    def load(cls, path: Path) -> ProjectConfig:
        if not path.exists():
            return cls()
        return cls.model_validate_json(path.read_bytes())

    def save(self, path: Path) -> None:
        atomic_write_text(path, self.model_dump_json(indent=2))
