"""
CLI - command line interface
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from .docker_api import DockerClient, DockerException, DockerService, FixtureDockerService
from .docker_api.models import format_bytes, sort_networks, truncated_id
from .settings_manager import SettingsManager

logger = logging.getLogger(__name__)

MUTATING_ACTIONS = ('rmi', 'rm', 'start', 'stop')


class TidyDockCLI:
    """TidyDock CLI interface"""

    def __init__(self, service: DockerService):
        """
        Initialize CLI

        Args:
            service: Docker service the commands run against
        """
        self.service = service

    def list_images(self):
        """List images"""
        images = asyncio.run(self.service.fetch_images())

        if not images:
            logger.info("No images found")
            return

        print(f"{'REPOSITORY':<35} {'TAG':<20} {'IMAGE ID':<14} {'CREATED':<18} {'SIZE':<10} {'IN USE':<6}")
        print("-" * 108)

        for image in images:
            created = image.created_at.strftime('%Y-%m-%d %H:%M')
            in_use = 'yes' if image.in_use else 'no'
            print(f"{image.repository:<35} {image.tag:<20} {image.short_id:<14} {created:<18} "
                  f"{format_bytes(image.size_bytes):<10} {in_use:<6}")

        print(f"\nTotal: {len(images)}")

    def list_containers(self):
        """List containers"""
        containers = asyncio.run(self.service.fetch_containers())

        if not containers:
            logger.info("No containers found")
            return

        print(f"{'NAME':<25} {'STATE':<10} {'STATUS':<25} {'IMAGE':<30} {'PORTS':<30} {'ID':<14}")
        print("-" * 139)

        for c in containers:
            print(f"{c.name:<25} {c.state:<10} {c.status:<25} {c.image:<30} {c.ports:<30} {c.short_id:<14}")

        print(f"\nTotal: {len(containers)}")

    def list_networks(self):
        """List networks, newest first"""
        networks = sort_networks(asyncio.run(self.service.fetch_networks()))

        if not networks:
            logger.info("Networks not found")
            return

        print(f"{'NAME':<25} {'DRIVER':<12} {'SCOPE':<8} {'SUBNET':<20} {'CONTAINERS':<10} {'CREATED':<25}")
        print("-" * 105)

        for n in networks:
            subnet = n.ipam.config[0].subnet if n.ipam.config and n.ipam.config[0].subnet else '-'
            created = n.created_at.strftime('%Y-%m-%d %H:%M') if n.created_at else n.created_raw or '-'
            print(f"{n.name:<25} {n.driver:<12} {n.scope:<8} {subnet:<20} {len(n.containers):<10} {created:<25}")

        print(f"\nTotal: {len(networks)}")

    def disk_usage(self):
        """Show disk usage summary"""
        usage = asyncio.run(self.service.fetch_disk_usage())

        rows = [
            ('Images', usage.image_summary),
            ('Containers', usage.container_summary),
            ('Local Volumes', usage.volume_summary),
            ('Build Cache', usage.build_cache_summary),
        ]

        print(f"{'TYPE':<15} {'TOTAL':<8} {'ACTIVE':<8} {'SIZE':<12} {'RECLAIMABLE':<12}")
        print("-" * 59)

        for title, summary in rows:
            print(f"{title:<15} {summary.total_count:<8} {summary.active_count:<8} "
                  f"{format_bytes(summary.total_size_bytes):<12} {format_bytes(summary.reclaimable_bytes):<12}")

        print(f"\nLayers: {format_bytes(usage.layers_size)}")

    def remove_image(self, image_id: str):
        """Remove image"""
        logger.info(f"Removing image {truncated_id(image_id)}...")
        asyncio.run(self.service.delete_image(image_id))
        logger.info(f"✓ Image {truncated_id(image_id)} removed")

    def remove_container(self, container_id: str):
        """Remove container"""
        logger.info(f"Removing container {container_id}...")
        asyncio.run(self.service.delete_container(container_id))
        logger.info(f"✓ Container {container_id} removed")

    def start_container(self, container_id: str):
        """Start container"""
        logger.info(f"Starting container {container_id}...")
        asyncio.run(self.service.start_container(container_id))
        logger.info(f"✓ Container {container_id} started")

    def stop_container(self, container_id: str):
        """Stop container"""
        logger.info(f"Stopping container {container_id}...")
        asyncio.run(self.service.stop_container(container_id))
        logger.info(f"✓ Container {container_id} stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tidydock',
        description='TidyDock - inspect and clean up a local Docker engine',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s containers                   # List all containers
  %(prog)s images                       # List named images
  %(prog)s df                           # Disk usage summary
  %(prog)s stop --id web-nginx
  %(prog)s rmi --id sha256:1a2b3c4d5e
"""
    )

    parser.add_argument(
        'action',
        choices=['images', 'containers', 'networks', 'df'] + list(MUTATING_ACTIONS),
        help='Action'
    )
    parser.add_argument('--id', dest='target', help='Image or container id (or name)')

    # Connection parameters
    parser.add_argument('--socket', help='Docker socket path (default: settings or auto-detect)')
    parser.add_argument('--timeout', type=float, help='Request timeout in seconds')
    parser.add_argument('--fixtures', action='store_true', help='Use canned sample data instead of the engine')
    parser.add_argument('--settings', help='Settings file path')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    return parser


def create_service(args, settings: SettingsManager) -> DockerService:
    if args.fixtures:
        return FixtureDockerService()
    socket_path = args.socket or settings.socket_path()
    timeout = args.timeout if args.timeout and args.timeout > 0 else settings.request_timeout()
    return DockerClient(socket_path=socket_path, timeout=timeout)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Start CLI application"""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = SettingsManager(settings_file=args.settings)
    level = logging.DEBUG if args.debug else getattr(logging, str(settings.get('log_level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(message)s')

    if args.action in MUTATING_ACTIONS and not args.target:
        parser.error(f"{args.action} requires --id")

    cli = TidyDockCLI(create_service(args, settings))

    # Executing action
    try:
        if args.action == 'images':
            cli.list_images()

        elif args.action == 'containers':
            cli.list_containers()

        elif args.action == 'networks':
            cli.list_networks()

        elif args.action == 'df':
            cli.disk_usage()

        elif args.action == 'rmi':
            cli.remove_image(args.target)

        elif args.action == 'rm':
            cli.remove_container(args.target)

        elif args.action == 'start':
            cli.start_container(args.target)

        elif args.action == 'stop':
            cli.stop_container(args.target)

    except DockerException as e:
        logger.debug(f"{args.action} failed ({e.kind.value})", exc_info=True)
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        return 130

    return 0
