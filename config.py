"""Configuration settings for the artifact repository server."""
import argparse
from dataclasses import dataclass
from typing import List, Optional, Tuple

# Storage
REPO_DIR = "./repository"

# Network
HOST = "0.0.0.0"
PORT = 8080

# Auth
REALM = "mvnr"

# Logging
LOGGER_NAME = "mvnr"
LOG_LEVEL = "INFO"
LOG_FILE = None


def parse_bind_address(value: str) -> Tuple[str, int]:
    """Split a ``host:port`` bind address into its parts."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise ValueError(f"Invalid host '{value}', expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in host '{value}'")
    if not 0 < port_number < 65536:
        raise ValueError(f"Port out of range in host '{value}'")
    return host, port_number


@dataclass(frozen=True)
class Settings:
    """Startup configuration, shared read-only by every request."""
    password: str
    repo_dir: str = REPO_DIR
    host: str = HOST
    port: int = PORT
    log_level: str = LOG_LEVEL
    log_file: Optional[str] = LOG_FILE

    @classmethod
    def from_args(cls, argv: Optional[List[str]] = None) -> 'Settings':
        """Create Settings from command line arguments."""
        parser = argparse.ArgumentParser(
            prog='mvnr',
            description='A simple Maven 2 repository server'
        )
        parser.add_argument('-p', '--password', required=True,
                            help='Shared secret required for every request')
        parser.add_argument('-r', '--repo', default=REPO_DIR,
                            help='Repository root directory')
        parser.add_argument('-H', '--host', default=f"{HOST}:{PORT}",
                            help='Bind address as host:port')
        parser.add_argument('--log-level', default=LOG_LEVEL,
                            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                            help='Console log level')
        parser.add_argument('--log-file', default=LOG_FILE,
                            help='Optional file for detailed logs')
        args = parser.parse_args(argv)

        try:
            host, port = parse_bind_address(args.host)
        except ValueError as e:
            parser.error(str(e))

        return cls(
            password=args.password,
            repo_dir=args.repo,
            host=host,
            port=port,
            log_level=args.log_level,
            log_file=args.log_file
        )
