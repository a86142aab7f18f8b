from __future__ import annotations

import argparse
import importlib
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from config import get_settings_module

from .attendance.model import PresenceSnapshot
from .common.datetime_utils import format_hhmm, parse_iso_date
from .common.logging import configure_logging, get_logger
from .container import Container, build_container
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_REFRESH_INTERVAL_SECONDS
from .database.bootstrap import apply_schema, list_tables

logger = get_logger(__name__)


def create_runtime() -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT", "plain"))
    logger.debug(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.debug("schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(
        db_config=db_config,
        grace_minutes=getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES),
        refresh_interval_seconds=getattr(settings, "REFRESH_INTERVAL_SECONDS", DEFAULT_REFRESH_INTERVAL_SECONDS),
    )


def render_snapshot(snapshot: PresenceSnapshot) -> str:
    s = snapshot.summary
    lines = [
        f"Presence {snapshot.work_date:%Y-%m-%d} "
        f"(in={s.clocked_in} break={s.on_break} out={s.clocked_out} not_started={s.not_started})",
    ]
    for r in snapshot.records:
        late = "LATE" if r.late else ""
        lines.append(
            f"{r.staff_id:<12} {r.full_name:<28} {r.status.value:<12} "
            f"{format_hhmm(r.clock_in):>5} {format_hhmm(r.clock_out):>5} {late}".rstrip()
        )
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print today's reconciled staff presence.")
    parser.add_argument("--date", type=parse_iso_date, default=None, help="YYYY-MM-DD (default: today)")
    args = parser.parse_args(argv)

    container = create_runtime()
    snapshot = container.presence_service.load_snapshot(args.date)
    print(render_snapshot(snapshot))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
