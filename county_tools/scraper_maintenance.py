"""
Command line entry points for running scrapers and re-processing data
that was fetched in previous runs.
"""

import logging
from typing import Optional, Type

import click
import pandas as pd

from county_tools import ALL_SCRAPERS
from county_tools.scrapers import base
from county_tools.scrapers.official.base import VariantDashboard

_logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True)
def main(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _choose_scraper(scraper_name) -> Type[base.DatasetBase]:
    matching_scrapers = [cls for cls in ALL_SCRAPERS if cls.__name__ == scraper_name]

    # Must match because scraper_name must be a choice of all existing scrapers.
    return matching_scrapers[-1]


def _print_rows(rows):
    pd.options.display.max_rows = 1000
    pd.options.display.max_columns = 100
    print(pd.DataFrame.from_records(rows).to_string(index=False))


scraper_choice = click.Choice(sorted([cls.__name__ for cls in ALL_SCRAPERS]))


@main.command()
@click.argument("scraper_name", type=scraper_choice)
@click.option("--date", "-d", type=pd.Timestamp, help="Execution date (default now)")
@click.option("--quiet", "-q", is_flag=True, help="Don't print the output rows")
def run_scraper(scraper_name: str, date: Optional[pd.Timestamp], quiet: bool):
    """Fetch, store and normalize data for one scraper"""
    scraper_cls = _choose_scraper(scraper_name)
    scraper = scraper_cls(date)

    raw_path = scraper._fetch()
    click.echo(f"Stored raw data at {raw_path}")
    clean_path = scraper._normalize()
    click.echo(f"Stored output rows at {clean_path}")

    if not quiet:
        _print_rows(scraper._read_clean())


@main.command()
@click.argument("scraper_name", type=scraper_choice)
@click.option("--start", "-s", type=pd.Timestamp)
@click.option("--end", "-e", type=pd.Timestamp)
@click.option("--latest", is_flag=True)
@click.option("--continue-on-fail", is_flag=True)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def rerun_scraper(
    scraper_name: str,
    start: Optional[pd.Timestamp],
    end: Optional[pd.Timestamp],
    latest: bool,
    continue_on_fail: bool,
    yes: bool,
):
    """Normalize previously fetched raw data again"""
    scraper_cls = _choose_scraper(scraper_name)
    times = scraper_cls.find_previous_fetch_execution_dates(
        start_date=start, end_date=end, only_last=latest
    )
    click.echo(f"Re-running {scraper_name} on the following dates")
    times_formatted = "\n ".join([str(time) for time in times])
    click.echo(f"{times_formatted}")
    if not yes:
        click.confirm("Continue?", abort=True)

    for time in times:
        click.echo(f"Running {scraper_name} for time {time}")
        scraper = scraper_cls(time)
        try:
            scraper.reprocess_from_already_fetched_data()
        except Exception:
            if continue_on_fail:
                _logger.exception("Scraper failed, continuing...")
                continue
            else:
                raise


@main.command()
@click.argument("scraper_name", type=scraper_choice)
@click.option("--date", "-d", type=pd.Timestamp, help="Show which variant runs on this date")
def list_variants(scraper_name: str, date: Optional[pd.Timestamp]):
    """Print the dated extraction variants of a scraper"""
    scraper_cls = _choose_scraper(scraper_name)
    if not issubclass(scraper_cls, VariantDashboard):
        raise click.UsageError(f"{scraper_name} has no dated variants")

    scraper = scraper_cls(date)
    active = scraper.variant.key
    for key in scraper_cls.variants.keys:
        marker = "*" if key == active else " "
        click.echo(f"{marker} {key}")


if __name__ == "__main__":
    main()
