"""Run one readiness evaluation from the command line.

Suitable as a container ``HEALTHCHECK``: exits 0 when the service is ready
and 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on the import path when executed as a script.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from servicehealth.core.config import get_settings  # noqa: E402
from servicehealth.core.logging import configure_logging  # noqa: E402
from servicehealth.schemas.health import OverallStatus, ReadinessErrorResponse, ReadinessResponse  # noqa: E402
from servicehealth.services.health_aggregator import describe_exception  # noqa: E402
from servicehealth.services.probe_registry import (  # noqa: E402
    close_dependency_clients,
    get_health_aggregator_instance,
    get_readiness_probes,
)

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate service readiness once.")
    parser.add_argument("--json", action="store_true", help="Print the readiness payload as JSON.")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()
    settings = get_settings()
    logger.debug("Checking readiness in %s environment.", settings.ENVIRONMENT)

    aggregator = get_health_aggregator_instance(settings=settings)
    try:
        probes = get_readiness_probes(settings=settings)
        report = await aggregator.evaluate(probes)
    except Exception as exc:  # noqa: BLE001 - reported as not ready
        payload = ReadinessErrorResponse(error=describe_exception(exc)).model_dump(mode="json")
        exit_code = 1
    else:
        payload = ReadinessResponse.from_report(report).model_dump(mode="json", exclude_none=True)
        exit_code = 0 if report.overall_status is OverallStatus.ready else 1
    finally:
        await close_dependency_clients()

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print(payload["status"])
        for name, probe_status in payload.get("checks", {}).items():
            print(f"  {name}: {probe_status}")
    return exit_code


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
