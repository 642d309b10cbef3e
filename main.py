"""
Main application entry point for the Cloud Identity groups tool
"""
import argparse
import logging
import sys

from auth import (
    create_service_with_delegation,
    create_service_without_delegation,
    describe_service_account,
    read_key_file,
    verify_token_access,
)
from config import Config, ServiceConfig, clean_scopes, new_service_config, parse_page_size
from errors import GroupsToolError
from groups import list_groups
from logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='List Cloud Identity groups with a service account',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Verify the key, then list groups with and without delegation
  python main.py --credentials key.json --customer-id C03ygpcl8 --delegated-user admin@example.com

  # Only check that the key can mint a token
  python main.py --mode verify

  # List groups as the service account itself
  python main.py --mode direct --page-size 50

  # Keep going with the delegated client if the direct one fails
  python main.py --continue-on-error
        '''
    )

    parser.add_argument(
        '--mode',
        choices=['all', 'verify', 'direct', 'delegated'],
        default='all',
        help='Steps to run (default: all)'
    )

    parser.add_argument(
        '--credentials',
        type=str,
        default=Config.CREDENTIALS_FILE,
        help=f'Service account key JSON (default: {Config.CREDENTIALS_FILE})'
    )

    parser.add_argument(
        '--delegated-user',
        type=str,
        default=Config.DELEGATED_USER,
        help='Workspace user to impersonate for the delegated client'
    )

    parser.add_argument(
        '--customer-id',
        type=str,
        default=Config.CUSTOMER_ID,
        help='Cloud Identity customer id, e.g. C03ygpcl8'
    )

    parser.add_argument(
        '--page-size',
        type=str,
        default=Config.PAGE_SIZE,
        help=f'Groups to request per listing (default: {Config.PAGE_SIZE})'
    )

    parser.add_argument(
        '--scopes', '--scope',
        dest='scopes',
        action='append',
        help='OAuth scope for token verification and delegation (repeatable)'
    )

    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        help='Run the delegated client even if the direct one fails'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=Config.LOG_LEVEL.upper(),
        help=f'Logging level (default: {Config.LOG_LEVEL})'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=Config.LOG_FILE,
        help='Also write logs to this file'
    )

    return parser.parse_args(argv)


def verify_step(config: ServiceConfig, describe=False):
    """Check the key can mint a token before building clients"""
    if describe:
        describe_service_account(read_key_file(config.service_account_key_path))

    verify_token_access(config)
    print("Token verification successful")


def direct_step(config: ServiceConfig, page_size):
    """List groups as the service account"""
    service = create_service_without_delegation(config)
    print("Successfully created service without delegation")
    list_groups(service, config.customer_id, page_size)


def delegated_step(config: ServiceConfig, page_size):
    """List groups as the delegated user"""
    service = create_service_with_delegation(config)
    print("Successfully created service with delegation")
    list_groups(service, config.customer_id, page_size)


def run(args) -> int:
    """
    Run the selected steps in order

    Returns:
        Process exit status
    """
    scopes = tuple(args.scopes) if args.scopes else Config.SCOPES

    try:
        config = new_service_config(args.credentials, args.delegated_user, args.customer_id, scopes)
    except GroupsToolError as e:
        logger.error(f"Failed to create service config: {e}")
        return 1

    logger.info(f"Using key file: {config.service_account_key_path}")

    # (label, callable, recoverable with --continue-on-error)
    steps = []
    if args.mode in ('all', 'verify'):
        steps.append(('verify token access',
                      lambda: verify_step(config, describe=args.mode == 'verify'), False))
    if args.mode in ('all', 'direct'):
        steps.append(('list groups without delegation',
                      lambda: direct_step(config, args.page_size), True))
    if args.mode in ('all', 'delegated'):
        steps.append(('list groups with delegation',
                      lambda: delegated_step(config, args.page_size), True))

    failed = []
    for label, step, recoverable in steps:
        try:
            step()
        except GroupsToolError as e:
            logger.error(f"Failed to {label}: {e}")
            if not (recoverable and args.continue_on_error):
                return 1
            failed.append(label)

    if failed:
        logger.error(f"{len(failed)} step(s) failed: {', '.join(failed)}")
        return 1
    return 0


def main(argv=None):
    """Main application entry point"""
    args = parse_arguments(argv)

    setup_logging(args.log_level, args.log_file or None)

    try:
        Config.validate(
            customer_id=args.customer_id,
            page_size=args.page_size,
            scopes=args.scopes,
        )
        args.page_size = parse_page_size(args.page_size)
    except ValueError as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    if args.scopes is not None:
        args.scopes = list(clean_scopes(args.scopes))

    logger.info(f"Mode: {args.mode}")
    sys.exit(run(args))


if __name__ == '__main__':
    main()
