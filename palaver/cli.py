"""
Command-line helpers shared by the server and client entry points.
"""

import argparse
import logging

from palaver.protocol import DEFAULT_HOST, DEFAULT_PORT

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def port_number(value):
    """argparse type for a TCP port in the range 1-65535."""
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid port number: {value}")
    if port <= 0 or port > 65535:
        raise argparse.ArgumentTypeError("Port must be between 1 and 65535.")
    return port


def build_parser(description, client=False):
    parser = argparse.ArgumentParser(description=description)
    if client:
        parser.add_argument('--host', default=DEFAULT_HOST, help='Server host')
    parser.add_argument('--port', type=port_number, default=DEFAULT_PORT,
                        help='Server port' if client else 'Port to listen on')
    if client:
        parser.add_argument('--nickname', default='',
                            help='Nickname to join with; the server assigns a guest name if blank')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser


def configure_logging(debug=False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
