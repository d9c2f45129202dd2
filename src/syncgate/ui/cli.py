# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from syncgate.app import import_catalog, open_engine
from syncgate.config import configure_logging
from syncgate.domain.errors import ConflictingStatesError
from syncgate.domain.model import Entity, ProviderKind

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping, Sequence
    from types import FrameType

    from syncgate.domain.engine import SyncRelevanceEngine
    from syncgate.domain.model import Scope

log = logging.getLogger(__name__)

EXIT_ENGINE_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_CONFLICT = 3

_ENTITY_COMMANDS = frozenset({"evaluate", "compute-state"})


def _add_entity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tenant", type=str, required=True, help="Tenant key owning the scopes")
    parser.add_argument("--target-id", type=int, required=True, help="Product id")
    parser.add_argument(
        "--parent-id",
        type=int,
        help="Parent product id when the target is evaluated as a variant",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decide whether catalog changes require a search index update"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import-catalog", help="Load a JSON catalog document")
    importer.add_argument("path", type=str, help="Path to the catalog document")

    evaluate = subparsers.add_parser(
        "evaluate",
        help="Check whether a product requires an update for one criterion",
    )
    evaluate.add_argument("--criterion", type=str, required=True, help="Criterion id")
    _add_entity_arguments(evaluate)
    evaluate.add_argument(
        "--recorded",
        type=str,
        default="{}",
        help='JSON object of recorded criteria values, e.g. \'{"stock_status": true}\'',
    )

    compute = subparsers.add_parser("compute-state", help="Compute a product state in a scope")
    compute.add_argument(
        "--kind",
        type=str,
        choices=[kind.value for kind in ProviderKind],
        required=True,
        help="State to compute",
    )
    compute.add_argument("--scope", type=str, required=True, help="Scope id")
    _add_entity_arguments(compute)

    aspects = subparsers.add_parser("aspects", help="Map changed attributes to aspects")
    aspects.add_argument("attributes", nargs="*", help="Changed attribute ids")

    grouping = subparsers.add_parser(
        "group-stock-targets",
        help="Group a product's target keys by stock status across the tenant's scopes",
    )
    grouping.add_argument("--tenant", type=str, required=True, help="Tenant key owning the scopes")
    grouping.add_argument("--target-id", type=int, required=True, help="Product id")

    return parser.parse_args(list(argv))


def _parse_recorded(value: str) -> dict[str, object]:
    try:
        recorded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid recorded values: {value}") from exc
    if not isinstance(recorded, dict):
        raise ValueError("Recorded values must be a JSON object")  # noqa: TRY004
    return recorded


def _build_entity(args: argparse.Namespace) -> Entity:
    return Entity(
        target_id=args.target_id,
        tenant_key=args.tenant,
        target_parent_id=args.parent_id,
    )


def _find_scope(engine: SyncRelevanceEngine, tenant_key: str, scope_id: str) -> Scope:
    for scope in engine.scopes.scopes_for_tenant(tenant_key):
        if scope.scope_id == scope_id:
            return scope
    raise LookupError(f"Unknown scope {scope_id!r} for tenant {tenant_key!r}")


def _grouping_to_json(grouping: Mapping[bool, Sequence[Hashable]]) -> dict[str, list[object]]:
    return {
        str(state).lower(): [list(key) if isinstance(key, tuple) else key for key in keys]
        for state, keys in sorted(grouping.items())
    }


def _dump(value: object) -> None:
    print(json.dumps(value, sort_keys=True))


def _run(
    args: argparse.Namespace,
    recorded: dict[str, object],
    entity: Entity | None,
) -> None:
    if args.command == "import-catalog":
        import_catalog(args.path)
        return

    engine = open_engine()
    if args.command == "evaluate":
        requires_update = engine.evaluate_criterion(args.criterion, entity, recorded)
        _dump({"criterion": args.criterion, "requires_update": requires_update})
    elif args.command == "compute-state":
        scope = _find_scope(engine, args.tenant, args.scope)
        state = engine.compute_state(args.kind, entity, scope)
        _dump({"kind": args.kind, "scope": scope.scope_id, "state": state})
    elif args.command == "aspects":
        aspects = engine.map_changed_attributes_to_aspects(args.attributes)
        _dump({"aspects": [aspect.label for aspect in sorted(aspects)]})
    elif args.command == "group-stock-targets":
        grouping = engine.group_stock_status_targets(args.target_id, tenant_key=args.tenant)
        _dump(_grouping_to_json(grouping))
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        recorded = _parse_recorded(getattr(parsed_args, "recorded", "{}"))
        entity = (
            _build_entity(parsed_args) if parsed_args.command in _ENTITY_COMMANDS else None
        )
        if parsed_args.command == "group-stock-targets" and parsed_args.target_id <= 0:
            raise ValueError(f"Invalid target id: {parsed_args.target_id}")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE_ERROR)

    try:
        _run(parsed_args, recorded, entity)
    except ConflictingStatesError as exc:
        log.warning("%s", exc)
        _dump(
            {
                "conflict": _grouping_to_json(exc.conflict_group),
                "by_scope": {
                    scope_id: _grouping_to_json(group) for scope_id, group in exc.by_scope.items()
                },
            }
        )
        sys.exit(EXIT_CONFLICT)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(EXIT_ENGINE_ERROR)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
