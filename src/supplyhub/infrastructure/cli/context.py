"""Objects shared by every CLI command through ``ctx.obj``."""

from __future__ import annotations

from dataclasses import dataclass

import click

from supplyhub.domain.model.actor import Actor
from supplyhub.infrastructure.bootstrap import Container


@dataclass
class CliContext:
    container: Container
    actor: Actor


pass_cli = click.make_pass_decorator(CliContext)
