#!/usr/bin/env python3
"""
Command-line interface for the hotel booking pipeline.

Usage:
    python cli.py [command] [options]

Commands:
    demo        Run in-process demo scenarios
    serve       Start one of the HTTP services
    consume     Run the notification dispatcher against the event log
    test        Run the test suite

Examples:
    python cli.py demo all
    python cli.py serve booking --port 8082
    python cli.py serve payment --port 8083
    python cli.py consume
"""

import argparse
import subprocess
import sys
import threading

SERVICES = {
    "booking": ("api.booking_app:app", 8082),
    "payment": ("api.payment_app:app", 8083),
    "delivery": ("api.delivery_app:app", 8084),
}


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from booking.demo import (
        run_booking_demo,
        run_owner_lookup_failure_demo,
        run_room_not_found_demo,
    )

    if scenario == "booking":
        run_booking_demo()
    elif scenario == "owner-lookup-failure":
        run_owner_lookup_failure_demo()
    elif scenario == "room-not-found":
        run_room_not_found_demo()
    elif scenario == "all":
        run_booking_demo()
        run_owner_lookup_failure_demo()
        run_room_not_found_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def run_server(service: str, host: str, port: int, reload: bool) -> None:
    """Start an HTTP service."""
    target, default_port = SERVICES[service]
    port = port or default_port
    cmd = ["uvicorn", target, f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting {service} service at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def run_consumer(poll_interval: float) -> None:
    """Run the notification dispatcher until interrupted."""
    from booking.hotel_directory import HttpHotelDirectory, StaticHotelDirectory
    from events.event_log import EventConsumer, EventLog
    from notification.delivery import DeliveryClient
    from notification.dispatcher import NotificationDispatcher
    from prometheus_client import start_http_server
    from shared.config import configure_logging, get_settings
    from shared.metrics import default_metrics

    settings = get_settings()
    configure_logging(settings.log_level)

    if not settings.event_log_path:
        print("EVENT_LOG_PATH must point at the booking service's event log file")
        sys.exit(1)

    if settings.hotel_service_url:
        hotel_directory = HttpHotelDirectory(settings.hotel_service_url, timeout=settings.http_timeout_seconds)
    else:
        hotel_directory = StaticHotelDirectory.from_json(settings.data_dir)

    dispatcher = NotificationDispatcher(
        channel=DeliveryClient(settings.delivery_service_url, timeout=settings.http_timeout_seconds),
        hotel_directory=hotel_directory,
        channel_name=settings.notification_channel,
        currency=settings.currency,
    )
    consumer = EventConsumer(
        EventLog(partitions=settings.event_log_partitions, path=settings.event_log_path),
        settings.booking_topic,
        settings.notification_group,
        dispatcher.handle_record,
    )

    if settings.consumer_metrics_port:
        start_http_server(settings.consumer_metrics_port, registry=default_metrics().registry)
        print(f"Metrics available at http://0.0.0.0:{settings.consumer_metrics_port}/metrics")

    stop = threading.Event()
    try:
        consumer.run(stop, poll_interval=poll_interval)
    except KeyboardInterrupt:
        stop.set()


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    subprocess.run(["pytest"] + args)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Hotel booking pipeline CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo all
  %(prog)s serve booking --reload
  %(prog)s consume --poll-interval 1
  %(prog)s test -v
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["booking", "owner-lookup-failure", "room-not-found", "all"],
        help="Which scenario to run",
    )

    serve_parser = subparsers.add_parser("serve", help="Start an HTTP service")
    serve_parser.add_argument("service", choices=sorted(SERVICES), help="Which service to start")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=0, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    consume_parser = subparsers.add_parser("consume", help="Run the notification dispatcher")
    consume_parser.add_argument("--poll-interval", type=float, default=0.5, help="Seconds between polls")

    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "serve":
        run_server(args.service, args.host, args.port, args.reload)
    elif args.command == "consume":
        run_consumer(args.poll_interval)
    elif args.command == "test":
        run_tests(args.pytest_args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
