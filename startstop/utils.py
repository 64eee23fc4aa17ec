from datetime import datetime


def print_banner(service_name: str, version: str = "1.0.0", services=None):
    """
    Print the startup banner.

    Args:
        service_name: Name of the program starting up
        version: Version number (default: "1.0.0")
        services: Names of managed services, in start order
    """
    print("=" * 80)
    print(f"  {service_name} - Sequential Service Lifecycle Orchestrator")
    print("=" * 80)
    print(f"  Version:        {version}")
    print(f"  Started:        {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    if services:
        print(f"  Start order:    {' -> '.join(services)}")
        print(f"  Stop order:     {' -> '.join(reversed(services))}")
    print("-" * 80)
    print("  Press Ctrl+C (SIGINT) or send SIGTERM to shut down.")
    print("=" * 80)
    print()
