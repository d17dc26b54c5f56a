import argparse
import asyncio
import logging
from typing import List, Optional

from .common.config import DashboardConfig, settings
from .common.formatting import format_date
from .integrations.daodao.client import IndexerClient
from .widgets.proposals import ProposalStore
from .widgets.treasury import TreasuryStore

logger = logging.getLogger(__name__)

WIDGETS = ["proposals", "treasury"]


def render_proposals(store: ProposalStore) -> List[str]:
    """Text rendering of the proposal panel."""
    if store.loading:
        return ["Loading proposals..."]

    lines = [f"Proposals ({len(store.proposals)})"]
    for proposal in store.proposals:
        lines.append(f"#{proposal.id} {proposal.title} [{proposal.status_label}]")
        if store.is_expanded(proposal.id):
            lines.append(f"    {proposal.description}")
            created = f"    Created: {format_date(proposal.created_at)}"
            if proposal.completed_at:
                created += f"  Completed: {format_date(proposal.completed_at)}"
            lines.append(created)
        else:
            lines.append(f"    {proposal.summary()}")
    if store.error:
        lines.append(store.error)
    return lines


def render_treasury(store: TreasuryStore) -> List[str]:
    """Text rendering of the treasury panel."""
    if store.loading:
        return ["Loading treasury..."]

    lines = ["Treasury"]
    for balance in store.balances():
        lines.append(f"{balance.formatted_amount} {balance.display_name}  ({balance.denom})")
    if store.error:
        lines.append(store.error)
    return lines


async def run_dashboard(config: DashboardConfig, widgets: List[str], once: bool = False):
    """Poll the selected widgets and log their state after every interval."""
    async with IndexerClient(config.indexer_base_url, config.chain_id) as client:
        proposals = ProposalStore(config, client) if "proposals" in widgets else None
        treasury = TreasuryStore(config, client) if "treasury" in widgets else None
        stores = [s for s in (proposals, treasury) if s is not None]

        if not stores:
            logger.error("No valid widgets specified")
            return

        if once:
            await asyncio.gather(*(s.refresh() for s in stores))
            log_panels(proposals, treasury)
            return

        for store in stores:
            store.start()
        try:
            # Give the immediate fetches a moment before the first render
            await asyncio.sleep(min(5.0, config.poll_interval))
            while True:
                log_panels(proposals, treasury)
                await asyncio.sleep(config.poll_interval)
        finally:
            for store in stores:
                store.close()


def log_panels(proposals: Optional[ProposalStore], treasury: Optional[TreasuryStore]):
    if treasury is not None:
        for line in render_treasury(treasury):
            logger.info(line)
    if proposals is not None:
        for line in render_proposals(proposals):
            logger.info(line)


async def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="DAO governance dashboard")
    parser.add_argument(
        "--widgets",
        nargs="+",
        choices=WIDGETS,
        default=WIDGETS,
        help="Specify which widgets to poll (default: all)"
    )
    parser.add_argument("--once", action="store_true", help="Refresh once, print and exit")
    parser.add_argument("--interval", type=float, default=None, help="Poll interval in seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = DashboardConfig.from_settings(settings, poll_interval=args.interval)
    logger.info(f"Watching DAO {config.dao_address} on {config.chain_id} every {config.poll_interval}s")

    try:
        await run_dashboard(config, args.widgets, once=args.once)
    except KeyboardInterrupt:
        logger.info("Dashboard stopped by user")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
