"""Jinja2 rendering of archetypes against CMS entry data.

An archetype sees exactly one variable, ``Entry``, holding the whole
entry map, e.g. ``{{ Entry.Title }}`` or ``{{ Entry.body }}``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from cmsbridge.shared.errors import NotFoundError, RenderError


class TemplateRenderer:
    """Renders archetype files with Jinja2.

    One environment is kept per archetype directory so archetypes can
    ``{% include %}`` their siblings.
    """

    def __init__(self, *, autoescape: bool = True) -> None:
        self.autoescape = autoescape
        self._envs: dict[Path, Environment] = {}

    def _environment(self, directory: Path) -> Environment:
        env = self._envs.get(directory)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(str(directory)),
                autoescape=self.autoescape,
                keep_trailing_newline=True,
            )
            self._envs[directory] = env
        return env

    def render(self, archetype_path: Path, entry: dict[str, Any]) -> str:
        """Render ``archetype_path`` with ``Entry`` bound to ``entry``.

        Raises:
            NotFoundError: If the archetype disappeared before rendering.
            RenderError: If the template fails to parse or render.
        """
        env = self._environment(archetype_path.parent)
        try:
            template = env.get_template(archetype_path.name)
            return template.render(Entry=entry)
        except TemplateNotFound as exc:
            raise NotFoundError(
                f"archetype not found: {archetype_path}", identifier=str(archetype_path)
            ) from exc
        except TemplateError as exc:
            raise RenderError(
                f"failed to render {archetype_path}: {exc}", identifier=str(archetype_path)
            ) from exc
