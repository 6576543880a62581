from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from sheet_import.config import ImportConfig
from sheet_import.errors import ClientError, ConfigurationError, ContactImportError, FetchError
from sheet_import.importer import ImportRequest, build_importer
from sheet_import.logging_setup import configure_logging

logger = logging.getLogger("sheet_import.cli")

def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import Google Sheet rows into GoHighLevel contacts")
    p.add_argument("--location-id", required=True, help="GoHighLevel location (sub-account) id")
    p.add_argument("--sheet-name", required=True, help="Tab name inside the configured spreadsheet")
    p.add_argument("--dry-run", action="store_true", help="Map and filter rows without calling the CRM")
    p.add_argument("--log-path", default="out/import_log.csv", help="CSV file for the per-row log")
    p.add_argument("--env-file", default=".env", help="dotenv file layered under the process environment")
    return p.parse_args(argv)

def write_log(records, log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(records, columns=["sheet_row", "status", "reason"]).to_csv(log_path, index=False)

def main(argv=None, importer_factory=build_importer) -> int:
    args = parse_args(argv)

    try:
        config = ImportConfig.from_env(env_file=args.env_file).validate()
    except ConfigurationError as e:
        print(f"{e}. Fill {args.env_file}")
        return 2
    configure_logging(config.log_level)

    request = ImportRequest(location_id=args.location_id.strip(), sheet_name=args.sheet_name.strip())
    try:
        result = importer_factory(config).run(request, dry_run=args.dry_run)
    except ClientError as e:
        print(e)
        return 2
    except FetchError as e:
        logger.error("Fetch failed: %s", e)
        print(f"Error importing contacts: {e}")
        return 1
    except ContactImportError as e:
        print(e)
        return 2

    log_path = Path(args.log_path)
    write_log(result.log_records(), log_path)
    print(result.message)
    print(f"Log saved to: {log_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
