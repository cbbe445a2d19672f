"""Document outline: the structured form of ``outline.md``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SectionOutline(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    key_points: list[str] = []


class Outline(BaseModel):
    """Title, overview and sections of the document being produced."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    overview: str | None = None
    sections: list[SectionOutline] = []

    @classmethod
    def from_markdown(cls, text: str) -> Outline:
        """Parse ``# title``, overview paragraphs, ``## section`` and ``- point`` lines."""
        title: str | None = None
        overview: list[str] = []
        sections: list[dict] = []
        for raw in text.splitlines():
            line = raw.strip()
            if line.startswith("## "):
                sections.append({"title": line[3:].strip(), "key_points": []})
            elif line.startswith("# ") and title is None and not sections:
                title = line[2:].strip()
            elif line.startswith(("- ", "* ")) and sections:
                sections[-1]["key_points"].append(line[2:].strip())
            elif line and not sections:
                overview.append(line)
        return cls(
            title=title,
            overview=" ".join(overview) or None,
            sections=[SectionOutline(**s) for s in sections],
        )

    def render_to_markdown(self) -> str:
        parts = [f"# {self.title or 'Untitled'}", ""]
        if self.overview:
            parts += ["## Overview", "", self.overview, ""]
        for i, section in enumerate(self.sections, start=1):
            parts.append(f"## Section {i}: {section.title}")
            parts += [f"- {point}" for point in section.key_points]
            parts.append("")
        return "\n".join(parts)
