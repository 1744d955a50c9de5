"""
Script para recalcular scores de compatibilidad.

Uso:
    python -m rentmatch.scripts.run_rescore --user-id <uuid>
    python -m rentmatch.scripts.run_rescore --all-users
    python -m rentmatch.scripts.run_rescore --user-id <uuid> --property-id <uuid>
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import structlog
from tenacity import (
    before_sleep_log,
    retry,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from rentmatch.config import get_settings
from rentmatch.matching import MatchScoreEngine

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Configura logging stdlib + structlog para scripts."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


async def run_rescore(
    engine: MatchScoreEngine,
    user_id: Optional[str] = None,
    max_attempts: int = 3,
    wait: Optional[wait_base] = None,
) -> dict:
    """
    Ejecuta el rescore de un usuario (o de todos) con reintentos.

    Los upserts son idempotentes, así que reintentar el batch entero
    después de una falla parcial es seguro.
    """

    @retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait if wait is not None else wait_exponential(multiplier=1, min=1, max=30),
        before_sleep=before_sleep_log(logging.getLogger(__name__), logging.WARNING),
        reraise=True,
    )
    async def _run() -> dict:
        if user_id:
            return await engine.recompute_all_for_user(user_id)
        return await engine.recompute_all_users()

    return await _run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recalcula scores de compatibilidad usuario x propiedad"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--user-id", help="UUID del usuario a recalcular")
    target.add_argument(
        "--all-users",
        action="store_true",
        help="Recalcular todos los usuarios con preferencias",
    )
    parser.add_argument(
        "--property-id",
        help="Con --user-id: calcular sólo este par e imprimir el desglose",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point del script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.property_id and not args.user_id:
        parser.error("--property-id requiere --user-id")

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        engine = MatchScoreEngine(settings=settings)

        if args.property_id:
            result = engine.compute_match_score(args.user_id, args.property_id)
            print(json.dumps({"score": result.score, "factors": result.factors}, indent=2))
            sys.exit(0)

        stats = asyncio.run(
            run_rescore(
                engine,
                user_id=args.user_id,
                max_attempts=settings.rescore_max_attempts,
            )
        )
        logger.info("Rescore finalizado", **stats)
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Rescore interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en rescore", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
