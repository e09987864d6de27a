#!/usr/bin/env python3
"""Upgrade the facts schema before the API starts.

Usage:
    python scripts/run_migrations.py [revision]

The revision defaults to "head". Failures are reported to Logfire and re-raised
so the container stops instead of serving against a half-migrated schema.
"""

import sys

import logfire
from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

from onlyfacts.config import Settings
from onlyfacts.util.observability import configure_logfire

ALEMBIC_INI = "alembic.ini"


def target_revision(argv: list[str]) -> str:
    return argv[1] if len(argv) > 1 else "head"


def main(argv: list[str]) -> int:
    settings = Settings()
    configure_logfire(settings)

    alembic_cfg = Config(ALEMBIC_INI)
    revision = target_revision(argv)
    heads = ScriptDirectory.from_config(alembic_cfg).get_heads()

    with logfire.span(
        "Upgrading facts schema",
        revision=revision,
        heads=heads,
        environment=settings.environment,
    ):
        try:
            command.upgrade(alembic_cfg, revision)
        except Exception as e:
            logfire.error(
                "Facts schema upgrade failed",
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            raise

    logfire.info("Facts schema is at {revision}", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
