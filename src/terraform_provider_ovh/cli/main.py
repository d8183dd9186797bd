"""
Main CLI module with argument parsing and command execution.

This module provides the ``ovh-provider`` command:
- inspect the provider schema and its resource tables
- resolve the OVH configuration the way the provider does
- read data sources against the OVH API
"""
import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from terraform_provider_ovh._package import VERSION
from terraform_provider_ovh.cli.formatters import format_output
from terraform_provider_ovh.config.manager import ConfigurationManager
from terraform_provider_ovh.domain.exceptions import DomainException
from terraform_provider_ovh.helpers.logger import setup_logging
from terraform_provider_ovh.infrastructure.exceptions import InfrastructureError
from terraform_provider_ovh.infrastructure.registry.resource_registry import TableKind
from terraform_provider_ovh.provider import Provider


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "ovh-provider",
        description="OVH provider plugin - credential resolution and OVH API handlers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schema                                     # Provider schema and tables
  %(prog)s resources --deprecated                     # Legacy names only
  %(prog)s configure --endpoint ovh-eu                # Show resolved credentials
  %(prog)s data ovh_domain_zone --arg name=example.com
        """
    )

    # Global options
    parser.add_argument('--config', help='Provider settings file (YAML or JSON)')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--format', choices=['json', 'yaml'], default='json', help='Output format')
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.required = True

    subparsers.add_parser('schema', help='Show the provider schema and handler tables')

    resources = subparsers.add_parser('resources', help='List resource and data source names')
    resources.add_argument('--kind', choices=[k.value for k in TableKind], help='Only list one table')
    resources.add_argument('--deprecated', action='store_true', help='Only list deprecated aliases')

    def add_provider_arguments(command: argparse.ArgumentParser) -> None:
        command.add_argument('--endpoint', help='OVH API endpoint (default: $OVH_ENDPOINT)')
        command.add_argument('--application-key', help='Application key (default: $OVH_APPLICATION_KEY)')
        command.add_argument('--application-secret', help='Application secret (default: $OVH_APPLICATION_SECRET)')
        command.add_argument('--consumer-key', help='Consumer key (default: $OVH_CONSUMER_KEY)')
        command.add_argument('--home', help='Directory holding .ovh.conf (default: current user home)')
        command.add_argument('--no-validate', action='store_true', help='Skip the /auth/time probe')

    configure = subparsers.add_parser('configure', help='Resolve and show the provider configuration')
    add_provider_arguments(configure)

    data = subparsers.add_parser('data', help='Read a data source')
    data.add_argument('name', help='Data source name (ex: ovh_domain_zone)')
    data.add_argument('--arg', action='append', default=[], metavar='KEY=VALUE',
                      help='Data source argument; JSON values are decoded')
    add_provider_arguments(data)

    return parser.parse_args(argv)


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Turn ``key=value`` strings into a dictionary, decoding JSON values."""
    result = {}
    for assignment in assignments:
        key, sep, value = assignment.partition('=')
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {assignment!r}")
        try:
            result[key] = json.loads(value)
        except json.JSONDecodeError:
            result[key] = value
    return result


def provider_block(args: argparse.Namespace) -> Dict[str, Any]:
    """Provider configuration from command line options; unset options use the environment."""
    block = {
        'endpoint': args.endpoint,
        'application_key': args.application_key,
        'application_secret': args.application_secret,
        'consumer_key': args.consumer_key,
    }
    return {k: v for k, v in block.items() if v is not None}


def execute_command(args: argparse.Namespace, provider: Provider) -> Any:
    """Run the selected command and return its output data."""
    if args.command == 'schema':
        return provider.describe()

    if args.command == 'resources':
        kinds = [TableKind(args.kind)] if args.kind else list(TableKind)
        return {
            kind.value: [
                entry.describe() for entry in provider.registry.entries(kind)
                if entry.deprecation_message or not args.deprecated
            ]
            for kind in kinds
        }

    if args.no_validate:
        provider.settings.client.validate_on_configure = False
    meta = provider.configure(provider_block(args), home=args.home)

    if args.command == 'configure':
        return meta.config.masked()

    if args.command == 'data':
        return provider.read_data_source(args.name, meta, parse_assignments(args.arg))

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)

    try:
        settings = ConfigurationManager(args.config).app_config
        if args.log_level:
            settings.logging.level = args.log_level
        logger = setup_logging(settings.logging)

        provider = Provider(settings=settings)
        result = execute_command(args, provider)
    except (DomainException, InfrastructureError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("Command completed", command=args.command)
    print(format_output(result, args.format))
    return 0


if __name__ == '__main__':
    sys.exit(main())
