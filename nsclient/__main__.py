"""Command line access to the NS API.

Examples:
    python -m nsclient --agent "Example Agent" region "the north pacific" delegate numnations
    python -m nsclient --agent "Example Agent" endorsements testlandia
"""

import argparse
import asyncio
import logging
import sys
import typing as t

from nsclient import api
from nsclient import core
from nsclient.exceptions import APIError, RateLimitedError
from nsclient.gate import RequestGate
from nsclient.shards import NationShard, RegionShard, ShardEnum, WACouncil, WAShard, WorldShard

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def lookup(enumeration: t.Type[ShardEnum], names: t.Iterable[str]) -> t.List[ShardEnum]:
    """Finds the shards of the enumeration with the given query names."""
    byValue = {member.value: member for member in enumeration}
    try:
        return [byValue[name.lower()] for name in names]
    except KeyError as error:
        raise APIError(f"Unknown {enumeration.__name__} {error}") from error


async def mutual_endorsements(client: api.NSClient, nation: str) -> t.Set[str]:
    """Finds the nations that both endorse, and are endorsed by, the nation."""
    endorsers = await client.nation(nation).endorsements()
    logger.info("Checking %s endorsers of %s", len(endorsers), nation)
    mutual = set()
    for endorser in endorsers:
        if nation in await client.nation(endorser).endorsements():
            mutual.add(str(endorser))
    return mutual


async def run(args: argparse.Namespace, client: api.NSClient) -> t.Iterable[str]:
    """Runs the chosen command, returning the lines to print."""
    if args.command == "endorsements":
        return sorted(await mutual_endorsements(client, args.nation))

    target: api.API
    if args.command == "nation":
        target = client.nation(args.name)
        shards = lookup(NationShard, args.shards)
    elif args.command == "region":
        target = client.region(args.name)
        shards = lookup(RegionShard, args.shards)
    elif args.command == "world":
        target = client.world()
        shards = lookup(WorldShard, args.shards)
    else:
        target = client.wa(WACouncil(args.council))
        shards = lookup(WAShard, args.shards)

    values = await target.shards(*shards)
    return [f"{name}: {value}" for name, value in values.items()]


def main(argv: t.Optional[t.Sequence[str]] = None) -> int:
    """Main function"""

    parser = argparse.ArgumentParser(description="Query the NationStates API.")
    parser.add_argument(
        "--agent", required=True, help="User agent identifying you to NationStates."
    )
    parser.add_argument("--verbose", action="store_true", help="Log each request.")
    parser.add_argument(
        "--patient",
        action="store_true",
        help="Wait out rate limit cool-downs instead of failing.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    nation = commands.add_parser("nation", help="Request nation shards.")
    nation.add_argument("name")
    nation.add_argument("shards", nargs="*")

    region = commands.add_parser("region", help="Request region shards.")
    region.add_argument("name")
    region.add_argument("shards", nargs="*")

    world = commands.add_parser("world", help="Request world shards.")
    world.add_argument("shards", nargs="+")

    wa = commands.add_parser("wa", help="Request World Assembly shards.")
    wa.add_argument("--council", type=int, choices=(1, 2), default=1)
    wa.add_argument("shards", nargs="+")

    endorsements = commands.add_parser(
        "endorsements", help="List mutual endorsements of a nation."
    )
    endorsements.add_argument("nation")

    args = parser.parse_args(argv)
    if not args.agent.strip():
        parser.error("--agent must not be empty")

    core.enable_logging(logging.INFO if args.verbose else logging.WARNING)

    with RequestGate(args.agent) as gate:
        client = api.NSClient(gate, patient=args.patient)
        try:
            lines = asyncio.run(run(args, client))
        except RateLimitedError as error:
            print(
                f"Rate limited, retry after {error.retry_after(gate.clock()):.0f} seconds",
                file=sys.stderr,
            )
            return 2
        except APIError as error:
            print(error, file=sys.stderr)
            return 1

    for line in lines:
        print(line)
    return 0


# script-only __main__ paradigm
if __name__ == "__main__":
    sys.exit(main())
